from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from .devices import Device
from .logs import LogEntry, LogView
from .results import FetchError


class DashboardStats(BaseModel):
    total_devices: int = 0
    online_devices: int = 0
    total_events: int = 0
    alert_count: int = 0


class DashboardSnapshot(BaseModel):
    loading: bool
    stats: DashboardStats
    devices: List[Device]
    logs: List[LogEntry]
    selected_device: Optional[Device] = None
    selected_device_logs: List[LogView] = []
    devices_error: Optional[FetchError] = None
    logs_error: Optional[FetchError] = None
