from __future__ import annotations

import os
from typing import Any, Dict, FrozenSet, Mapping, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_URL = "https://v0-project1-r9.vercel.app"

# Older deployments only export the browser-facing name.
LEGACY_ALIASES = {"NEXT_PUBLIC_API_URL": "API_URL"}


class AppConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    api_url: str = Field(DEFAULT_API_URL, alias="API_URL")
    poll_interval_seconds: float = Field(5.0, alias="POLL_INTERVAL_SECONDS", gt=0)
    log_limit: int = Field(50, alias="LOG_LIMIT", ge=1)
    request_timeout_seconds: Optional[float] = Field(None, alias="REQUEST_TIMEOUT_SECONDS", gt=0)
    display_timezone: str = Field("UTC", alias="DISPLAY_TIMEZONE")
    alert_severities: str = Field("warning,critical", alias="ALERT_SEVERITIES")

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            return DEFAULT_API_URL
        return value

    @field_validator("display_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value

    @property
    def timezone(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.display_timezone)

    @property
    def request_timeout(self) -> float:
        if self.request_timeout_seconds is not None:
            return self.request_timeout_seconds
        return self.poll_interval_seconds * 2

    @property
    def alert_severity_set(self) -> FrozenSet[str]:
        return frozenset(
            item.strip().lower() for item in self.alert_severities.split(",") if item.strip()
        )


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the configuration from environment-style settings.

    Only the upper-case aliases are read; anything missing falls back to the
    defaults above. Empty strings count as missing.
    """
    source = os.environ if environ is None else environ
    payload: Dict[str, Any] = {}
    for legacy, alias in LEGACY_ALIASES.items():
        if source.get(legacy):
            payload[alias] = source[legacy]
    for field_name, model_field in AppConfig.model_fields.items():
        alias = model_field.alias or field_name.upper()
        value = source.get(alias)
        if value:
            payload[alias] = value
    return AppConfig.model_validate(payload)


__all__ = ["AppConfig", "DEFAULT_API_URL", "load_config"]
