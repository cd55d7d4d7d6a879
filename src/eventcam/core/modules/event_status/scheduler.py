import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from datetime import datetime

import structlog

from eventcam.core.modules.event_status.models import EventStatusSyncResult
from eventcam.core.modules.event_status.timing import seconds_until_next_boundary
from eventcam.utils import now

logger = structlog.get_logger(__name__)


class EventStatusScheduler:
    """Background task firing at every UTC half-day boundary (00:00 and 12:00).

    The next timer is armed only after the current tick settles, and a failing
    tick never stops the loop.
    """

    def __init__(
        self,
        tick: Callable[[], Awaitable[EventStatusSyncResult]],
        clock: Callable[[], datetime] = now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._tick = tick
        self._clock = clock
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="event-status-scheduler")
        logger.info("event_status_scheduler_started", schedule="00:00 and 12:00 UTC")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("event_status_scheduler_stopped")

    async def run_tick(self) -> EventStatusSyncResult | None:
        """Run one tick, logging instead of raising on failure."""
        try:
            result = await self._tick()
        except Exception:
            logger.exception("event_status_sync_failed")
            return None
        logger.info(
            "event_status_sync_complete",
            activated=result.activated,
            closed=result.closed,
            open_buffer_hours=result.open_buffer_hours,
            close_buffer_hours=result.close_buffer_hours,
        )
        return result

    async def _run(self) -> None:
        while True:
            delay = seconds_until_next_boundary(self._clock())
            logger.debug("event_status_sync_scheduled", delay_seconds=delay)
            await self._sleep(delay)
            await self.run_tick()
