import asyncio
from datetime import datetime
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from eventcam.core.core import Service
from eventcam.core.modules.event.models import EventStatus
from eventcam.core.modules.event_status.models import EventStatusSyncResult, SyncWindow
from eventcam.core.modules.event_status.scheduler import EventStatusScheduler
from eventcam.core.modules.event_status.timing import compute_sync_window
from eventcam.utils import now


class EventStatusService(Service):
    """Advances event status from wall-clock time windows."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("events")
        self.scheduler = EventStatusScheduler(self.sync_once)

    async def on_start(self) -> None:
        if self.core.config.enable_event_status_scheduler:
            self.scheduler.start()

    async def on_stop(self) -> None:
        await self.scheduler.stop()

    async def sync_once(self, current_time: datetime | None = None) -> EventStatusSyncResult:
        """Run the activate and close bulk updates concurrently.

        Events already active or closed are not matched again, so a repeated
        tick with the same data changes nothing.
        """
        config = self.core.config
        window = compute_sync_window(current_time or now(), config.event_open_early_hours, config.event_close_late_hours)
        activated, closed = await asyncio.gather(self._activate(window), self._close(window))
        return EventStatusSyncResult(
            activated=activated,
            closed=closed,
            open_buffer_hours=config.event_open_early_hours,
            close_buffer_hours=config.event_close_late_hours,
            executed_at=window.now,
        )

    async def _activate(self, window: SyncWindow) -> int:
        result = await self._collection.update_many(
            {
                "status": EventStatus.DRAFT,
                "event_date": {"$lte": window.activate_from},
                "end_date": {"$gte": window.close_cutoff},
            },
            {"$set": {"status": EventStatus.ACTIVE, "updated_at": window.now}},
        )
        return result.modified_count

    async def _close(self, window: SyncWindow) -> int:
        result = await self._collection.update_many(
            {
                "status": {"$in": [EventStatus.DRAFT, EventStatus.ACTIVE]},
                "end_date": {"$lt": window.close_cutoff},
            },
            {"$set": {"status": EventStatus.CLOSED, "updated_at": window.now}},
        )
        return result.modified_count
