from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from eventcam.core.core import Service
from eventcam.core.modules.event.models import Event
from eventcam.errors import NotFoundError
from eventcam.utils import is_slug


class EventService(Service):
    """Read access to events. Event CRUD belongs to the organizer dashboard."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("events")

    async def on_start(self) -> None:
        await self._collection.create_index([("slug", 1)], unique=True)
        await self._collection.create_index([("organizer_id", 1)])
        await self._collection.create_index([("status", 1), ("end_date", 1)])

    async def get_event(self, event_id: UUID) -> Event:
        doc = await self._collection.find_one({"_id": event_id})
        if doc is None:
            raise NotFoundError(f"Event '{event_id}' not found")
        return Event.model_validate(doc)

    async def get_event_by_slug(self, slug: str) -> Event:
        """Find an event by its invite slug. Case and surrounding spaces are ignored."""
        slug = slug.strip().lower()
        if not is_slug(slug):
            raise NotFoundError(f"Event '{slug}' not found")
        doc = await self._collection.find_one({"slug": slug})
        if doc is None:
            raise NotFoundError(f"Event '{slug}' not found")
        return Event.model_validate(doc)
