"""Pure derivations over the current dashboard state.

Nothing here is cached; at a 50-entry log window recomputing on every read is
cheaper than keeping anything in sync.
"""
from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional, Sequence

from ..schemas.dashboard import DashboardStats
from ..schemas.devices import ONLINE_STATUS, Device
from ..schemas.logs import LogEntry

DEFAULT_ALERT_SEVERITIES = frozenset({"warning", "critical"})


def total_devices(devices: Sequence[Device]) -> int:
    return len(devices)


def online_devices(devices: Iterable[Device]) -> int:
    return sum(1 for device in devices if device.status == ONLINE_STATUS)


def total_events(logs: Sequence[LogEntry]) -> int:
    return len(logs)


def alert_count(logs: Iterable[LogEntry], severities: AbstractSet[str] = DEFAULT_ALERT_SEVERITIES) -> int:
    return sum(1 for log in logs if log.severity.strip().lower() in severities)


def device_logs(logs: Iterable[LogEntry], device_id: str) -> List[LogEntry]:
    return [log for log in logs if log.device_id == device_id]


def find_device(devices: Iterable[Device], device_id: str) -> Optional[Device]:
    return next((device for device in devices if device.device_id == device_id), None)


def resolve_selection(devices: Sequence[Device], selected: Optional[Device]) -> Optional[Device]:
    """Return the fresh snapshot of ``selected`` from ``devices``, or None if it is gone."""
    if selected is None:
        return None
    return find_device(devices, selected.device_id)


def compute_stats(
    devices: Sequence[Device],
    logs: Sequence[LogEntry],
    severities: AbstractSet[str] = DEFAULT_ALERT_SEVERITIES,
) -> DashboardStats:
    return DashboardStats(
        total_devices=total_devices(devices),
        online_devices=online_devices(devices),
        total_events=total_events(logs),
        alert_count=alert_count(logs, severities),
    )


__all__ = [
    "DEFAULT_ALERT_SEVERITIES",
    "alert_count",
    "compute_stats",
    "device_logs",
    "find_device",
    "online_devices",
    "resolve_selection",
    "total_devices",
    "total_events",
]
