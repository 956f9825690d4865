from __future__ import annotations

import logging
from typing import Callable, List, Literal, Optional

from ..schemas.devices import Device
from ..schemas.logs import LogEntry
from ..schemas.results import FetchError
from .derive import resolve_selection

logger = logging.getLogger(__name__)

Collection = Literal["devices", "logs"]
Listener = Callable[["DashboardState"], None]


class DashboardState:
    """Latest device and log snapshots plus the user's selection.

    Every setter replaces a whole collection. Once :meth:`close` has been
    called, all mutations are ignored so late fetch results cannot write into
    a torn-down view.
    """

    def __init__(self) -> None:
        self.devices: List[Device] = []
        self.logs: List[LogEntry] = []
        self.selected_device: Optional[Device] = None
        self.loading = True
        self.devices_error: Optional[FetchError] = None
        self.logs_error: Optional[FetchError] = None
        self._closed = False
        self._listeners: List[Listener] = []

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True
        self._listeners.clear()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_devices(self, devices: List[Device]) -> None:
        if self._closed:
            return
        self.devices = list(devices)
        self.devices_error = None
        previous = self.selected_device
        self.selected_device = resolve_selection(self.devices, previous)
        if previous is not None and self.selected_device is None:
            logger.info("Selected device %s left the fleet; clearing selection", previous.device_id)
        self._notify()

    def set_logs(self, logs: List[LogEntry]) -> None:
        if self._closed:
            return
        self.logs = list(logs)
        self.logs_error = None
        self._notify()

    def select_device(self, device: Device) -> None:
        if self._closed:
            return
        self.selected_device = device.model_copy()
        self._notify()

    def clear_selection(self) -> None:
        if self._closed:
            return
        self.selected_device = None
        self._notify()

    def mark_loaded(self) -> None:
        if self._closed or not self.loading:
            return
        self.loading = False
        self._notify()

    def record_failure(self, collection: Collection, error: FetchError) -> None:
        if self._closed:
            return
        if collection == "devices":
            self.devices_error = error
        else:
            self.logs_error = error
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:  # noqa: BLE001
                logger.exception("Dashboard state listener %r failed", listener)


__all__ = ["Collection", "DashboardState", "Listener"]
