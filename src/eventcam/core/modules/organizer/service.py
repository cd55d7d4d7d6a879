from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from eventcam.core.core import Service
from eventcam.core.modules.identity.models import Identity, fallback_name_from_email
from eventcam.core.modules.organizer.models import Organizer
from eventcam.errors import WriteFailedError
from eventcam.utils import now

logger = structlog.get_logger(__name__)


class OrganizerService(Service):
    """Organizer rows created and refreshed from verified identities."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("organizers")

    async def on_start(self) -> None:
        await self._collection.create_index([("email", 1)])

    async def find_organizer(self, organizer_id: str) -> Organizer | None:
        doc = await self._collection.find_one({"_id": organizer_id})
        return Organizer.model_validate(doc) if doc is not None else None

    async def ensure_organizer(self, identity: Identity) -> Organizer:
        """Insert or update the organizer row for a verified identity.

        Email is refreshed from the identity whenever it carries one. The
        display name is kept once set, otherwise derived from the identity.
        """
        timestamp = now()
        derived_name = identity.name or fallback_name_from_email(identity.email)
        update: dict[str, Any] = {
            "$set": {"updated_at": timestamp},
            "$setOnInsert": {"name": derived_name, "created_at": timestamp},
        }
        if identity.email:
            update["$set"]["email"] = identity.email
        else:
            update["$setOnInsert"]["email"] = None

        doc = await self._collection.find_one_and_update(
            {"_id": identity.id}, update, upsert=True, return_document=ReturnDocument.AFTER
        )
        if doc is None:
            raise WriteFailedError("Failed to upsert organizer")

        if not doc.get("name"):
            # Row existed without a name
            doc = await self._collection.find_one_and_update(
                {"_id": identity.id}, {"$set": {"name": derived_name}}, return_document=ReturnDocument.AFTER
            )
            if doc is None:
                raise WriteFailedError("Failed to upsert organizer")

        return Organizer.model_validate(doc)
