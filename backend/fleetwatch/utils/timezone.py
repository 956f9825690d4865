from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def ensure_timezone(dt: datetime, tz: pytz.BaseTzInfo) -> datetime:
    # Naive service timestamps are UTC.
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(tz)


def localize_timestamp(value: Optional[str], tz: pytz.BaseTzInfo) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(str(value))
    except (ValueError, TypeError, OverflowError):
        return None
    try:
        return ensure_timezone(parsed, tz)
    except (ValueError, OverflowError):
        # Instants at the edge of the calendar cannot shift into every zone.
        return None


def format_timestamp(value: Optional[str], tz: pytz.BaseTzInfo) -> str:
    localized = localize_timestamp(value, tz)
    if localized is None:
        return ""
    return localized.strftime(DISPLAY_FORMAT)


__all__ = ["DISPLAY_FORMAT", "ensure_timezone", "format_timestamp", "localize_timestamp"]
