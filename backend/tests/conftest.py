from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import pytest

from fleetwatch.config import AppConfig
from fleetwatch.schemas.devices import Device
from fleetwatch.schemas.logs import LogEntry
from fleetwatch.schemas.results import FetchResult
from fleetwatch.services.client import DashboardClient

BASE_URL = "http://registry.test"

DEVICES = [
    {
        "device_id": "A",
        "device_name": "Front desk",
        "owner": "alice",
        "location": "Lobby",
        "status": "online",
        "hostname": "desk-a",
        "ip_address": "10.0.0.10",
    },
    {
        "device_id": "B",
        "device_name": "Lab bench",
        "owner": "bob",
        "location": "Lab 2",
        "status": "offline",
        "hostname": "bench-b",
        "ip_address": "10.0.0.11",
    },
]

LOGS = [
    {
        "id": "1",
        "device_id": "A",
        "log_type": "usb",
        "hardware_type": "usb_storage",
        "event": "connected",
        "message": "SanDisk Ultra attached",
        "severity": "info",
        "timestamp": "2024-01-01T00:00:00Z",
    },
]


class FakeRegistry:
    """In-memory stand-in for the remote device service, served through httpx.MockTransport."""

    def __init__(self, devices: Optional[List[Dict[str, Any]]] = None, logs: Optional[List[Dict[str, Any]]] = None):
        self.devices = list(DEVICES if devices is None else devices)
        self.logs = list(LOGS if logs is None else logs)
        self.devices_status = 200
        self.logs_status = 200
        self.fail_devices: Optional[Exception] = None
        self.fail_logs: Optional[Exception] = None
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/devices/list":
            if self.fail_devices is not None:
                raise self.fail_devices
            return httpx.Response(self.devices_status, json={"devices": self.devices})
        if request.url.path == "/api/devices/logs":
            if self.fail_logs is not None:
                raise self.fail_logs
            limit = int(request.url.params.get("limit", "50"))
            return httpx.Response(self.logs_status, json={"logs": self.logs[:limit]})
        return httpx.Response(404, json={"detail": "Not Found"})

    def client(self, log_limit: int = 50) -> DashboardClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return DashboardClient(BASE_URL, log_limit=log_limit, http=http)


class GatedClient:
    """Client whose responses are released by the test, one future per call."""

    base_url = BASE_URL

    def __init__(self) -> None:
        self.device_calls: List[asyncio.Future] = []
        self.log_calls: List[asyncio.Future] = []
        self.closed = False

    async def list_devices(self) -> FetchResult[Device]:
        future = asyncio.get_running_loop().create_future()
        self.device_calls.append(future)
        return await future

    async def list_logs(self, limit: Optional[int] = None) -> FetchResult[LogEntry]:
        future = asyncio.get_running_loop().create_future()
        self.log_calls.append(future)
        return await future

    async def aclose(self) -> None:
        self.closed = True


def devices_result(*device_ids: str, status: str = "online") -> FetchResult[Device]:
    return FetchResult[Device].success([Device(device_id=device_id, status=status) for device_id in device_ids])


def logs_result(*pairs: str) -> FetchResult[LogEntry]:
    """Build a logs result from ``"id:device_id"`` strings."""
    entries = []
    for pair in pairs:
        log_id, device_id = pair.split(":")
        entries.append(LogEntry(id=log_id, device_id=device_id, event="connected"))
    return FetchResult[LogEntry].success(entries)


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(api_url=BASE_URL, poll_interval_seconds=0.05, display_timezone="America/Sao_Paulo")
