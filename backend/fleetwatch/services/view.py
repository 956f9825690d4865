from __future__ import annotations

import logging
from typing import List, Optional

from ..config import AppConfig
from ..schemas.dashboard import DashboardSnapshot, DashboardStats
from ..schemas.devices import Device
from ..schemas.logs import LogEntry, LogView
from ..tasks.poller import Poller
from ..utils.timezone import format_timestamp
from . import derive
from .client import DashboardClient
from .state import DashboardState

logger = logging.getLogger(__name__)


class DashboardView:
    """The live dashboard: state, its refresh loop and everything derived from it.

    ``activate`` starts polling and ``deactivate`` tears the view down; after
    teardown the view is inert and a new one has to be built.
    """

    def __init__(self, config: AppConfig, client: Optional[DashboardClient] = None) -> None:
        self._config = config
        self._client = client or DashboardClient(
            config.api_url,
            timeout=config.request_timeout,
            log_limit=config.log_limit,
        )
        self.state = DashboardState()
        self.poller = Poller(
            self._client,
            self.state,
            interval=config.poll_interval_seconds,
            log_limit=config.log_limit,
        )

    @property
    def config(self) -> AppConfig:
        return self._config

    async def activate(self) -> None:
        await self.poller.start()

    async def deactivate(self) -> None:
        await self.poller.stop()
        self.state.close()
        await self.poller.join()
        await self._client.aclose()
        logger.info("Dashboard view torn down")

    async def refresh(self) -> None:
        await self.poller.refresh()

    @property
    def devices(self) -> List[Device]:
        return self.state.devices

    @property
    def logs(self) -> List[LogEntry]:
        return self.state.logs

    @property
    def selected_device(self) -> Optional[Device]:
        return self.state.selected_device

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def total_devices(self) -> int:
        return derive.total_devices(self.state.devices)

    @property
    def online_devices(self) -> int:
        return derive.online_devices(self.state.devices)

    @property
    def total_events(self) -> int:
        return derive.total_events(self.state.logs)

    @property
    def alert_count(self) -> int:
        return derive.alert_count(self.state.logs, self._config.alert_severity_set)

    def stats(self) -> DashboardStats:
        return derive.compute_stats(self.state.devices, self.state.logs, self._config.alert_severity_set)

    def device_logs(self, device_id: str) -> List[LogEntry]:
        return derive.device_logs(self.state.logs, device_id)

    def device_log_views(self, device_id: str) -> List[LogView]:
        tz = self._config.timezone
        return [
            LogView(**log.model_dump(), displayed_at=format_timestamp(log.timestamp, tz))
            for log in self.device_logs(device_id)
        ]

    def find_device(self, device_id: str) -> Optional[Device]:
        return derive.find_device(self.state.devices, device_id)

    def on_select_device(self, device: Device) -> None:
        self.state.select_device(device)

    def clear_selection(self) -> None:
        self.state.clear_selection()

    def snapshot(self) -> DashboardSnapshot:
        selected = self.state.selected_device
        return DashboardSnapshot(
            loading=self.state.loading,
            stats=self.stats(),
            devices=list(self.state.devices),
            logs=list(self.state.logs),
            selected_device=selected,
            selected_device_logs=self.device_log_views(selected.device_id) if selected else [],
            devices_error=self.state.devices_error,
            logs_error=self.state.logs_error,
        )


__all__ = ["DashboardView"]
