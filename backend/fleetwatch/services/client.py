from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..schemas.devices import Device
from ..schemas.logs import LogEntry
from ..schemas.results import FetchResult

logger = logging.getLogger(__name__)

DEVICES_ENDPOINT = "/api/devices/list"
LOGS_ENDPOINT = "/api/devices/logs"

RecordT = TypeVar("RecordT", bound=BaseModel)


class DashboardClient:
    """Read-only client for the device registry service.

    Both operations resolve to a :class:`FetchResult`; transport and parse
    problems are logged and returned as a failure, never raised.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        log_limit: int = 50,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._log_limit = log_limit
        self._http = http or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_devices(self) -> FetchResult[Device]:
        return await self._fetch(DEVICES_ENDPOINT, "devices", Device)

    async def list_logs(self, limit: Optional[int] = None) -> FetchResult[LogEntry]:
        limit = self._log_limit if limit is None else limit
        return await self._fetch(LOGS_ENDPOINT, "logs", LogEntry, params={"limit": limit})

    async def _fetch(
        self,
        endpoint: str,
        field: str,
        model: Type[RecordT],
        params: Optional[Dict[str, Any]] = None,
    ) -> FetchResult[RecordT]:
        url = f"{self._base_url}{endpoint}"
        result_type = FetchResult[model]
        try:
            response = await self._http.get(url, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Timed out fetching %s from %s: %s", field, url, exc)
            return result_type.failure("timeout", str(exc) or "request timed out", url)
        except httpx.HTTPStatusError as exc:
            logger.warning("Error fetching %s from %s: %s", field, url, exc)
            return result_type.failure("status", f"HTTP {exc.response.status_code}", url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Error fetching %s from %s: %s", field, url, exc)
            return result_type.failure("transport", str(exc) or type(exc).__name__, url)

        try:
            items = _parse_collection(response, field, model)
        except (ValueError, ValidationError) as exc:
            logger.warning("Malformed %s payload from %s: %s", field, url, exc)
            return result_type.failure("parse", str(exc), url)
        return result_type.success(items)


def _parse_collection(response: httpx.Response, field: str, model: Type[RecordT]) -> List[RecordT]:
    try:
        payload = response.json()
    except json.JSONDecodeError as exc:
        raise ValueError(f"response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    records = payload.get(field)
    # An absent or null field is an empty collection, not an error.
    if records is None:
        return []
    if not isinstance(records, list):
        raise ValueError(f"field {field!r} is not a list")
    return [model.model_validate(record) for record in records]


__all__ = ["DEVICES_ENDPOINT", "LOGS_ENDPOINT", "DashboardClient"]
