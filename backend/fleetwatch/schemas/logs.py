from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytz
from pydantic import BaseModel, ConfigDict

from ..utils.timezone import localize_timestamp


class LogEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    device_id: str
    log_type: str = ""
    hardware_type: str = ""
    event: str = ""
    message: str = ""
    severity: str = ""
    timestamp: str = ""

    def local_time(self, tz: pytz.BaseTzInfo) -> Optional[datetime]:
        return localize_timestamp(self.timestamp, tz)


class LogView(LogEntry):
    """A log entry as handed to the presentation layer."""

    displayed_at: str = ""
