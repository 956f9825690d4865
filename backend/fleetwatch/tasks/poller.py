from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Dict, Optional, Set

from ..schemas.results import FetchResult
from ..services.client import DashboardClient
from ..services.state import Collection, DashboardState

logger = logging.getLogger(__name__)


class Poller:
    """Refreshes a :class:`DashboardState` from a :class:`DashboardClient` on a timer.

    Every tick fires both fetches as independent tasks without waiting for the
    previous tick. Each fetch is stamped with a per-collection sequence number
    when issued; a result is applied only if it is newer than the last one
    applied, so a slow older response can never overwrite a newer snapshot.
    """

    def __init__(
        self,
        client: DashboardClient,
        state: DashboardState,
        *,
        interval: float = 5.0,
        log_limit: Optional[int] = None,
    ) -> None:
        self._client = client
        self._state = state
        self._interval = interval
        self._log_limit = log_limit
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()
        self._issued: Dict[str, int] = {"devices": 0, "logs": 0}
        self._applied: Dict[str, int] = {"devices": 0, "logs": 0}
        # Cleared by stop(); results arriving afterwards are dropped.
        self._active = True
        self.ticks = 0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    async def start(self) -> None:
        if self._task and not self._task.done():
            return
        self._active = True
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run(), name="dashboard-poller")
        logger.info("Polling %s every %.1fs", self._client.base_url, self._interval)

    async def stop(self) -> None:
        """Stop ticking. Fetches already in flight finish but are discarded."""
        self._active = False
        self._stop_event.set()
        if self._task:
            await self._task
            self._task = None
        logger.info("Polling stopped after %d ticks", self.ticks)

    async def join(self) -> None:
        """Wait until every in-flight fetch has settled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def tick(self) -> None:
        if not self._active:
            return
        self.ticks += 1
        self._spawn("devices", self._client.list_devices())
        self._spawn("logs", self._client.list_logs(self._log_limit))

    async def refresh(self) -> None:
        """Run one tick and wait for both of its fetches."""
        self.tick()
        await self.join()

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            self.tick()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue

    def _spawn(self, collection: Collection, fetch: Awaitable[FetchResult]) -> None:
        self._issued[collection] += 1
        seq = self._issued[collection]
        task = asyncio.create_task(self._complete(collection, seq, fetch), name=f"fetch-{collection}-{seq}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _complete(self, collection: Collection, seq: int, fetch: Awaitable[FetchResult]) -> None:
        try:
            result = await fetch
        except Exception:  # noqa: BLE001
            logger.exception("Fetching %s raised unexpectedly", collection)
            if collection == "devices" and self._active:
                self._state.mark_loaded()
            return
        try:
            self._apply(collection, seq, result)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to apply %s result #%d", collection, seq)

    def _apply(self, collection: Collection, seq: int, result: FetchResult) -> None:
        if not self._active or self._state.closed:
            logger.debug("Discarding %s result #%d after teardown", collection, seq)
            return
        if collection == "devices":
            # The first device response ends loading whatever its outcome.
            self._state.mark_loaded()
        if seq <= self._applied[collection]:
            logger.debug(
                "Discarding stale %s result #%d (already applied #%d)",
                collection,
                seq,
                self._applied[collection],
            )
            return
        if not result.ok:
            # Failures never advance the applied sequence, so an older success can still land.
            self._state.record_failure(collection, result.error)
            return
        self._applied[collection] = seq
        if collection == "devices":
            self._state.set_devices(result.items)
        else:
            self._state.set_logs(result.items)


__all__ = ["Poller"]
