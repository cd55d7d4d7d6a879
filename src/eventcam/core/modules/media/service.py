from datetime import timedelta
from typing import Any
from uuid import UUID, uuid4

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from eventcam.core.core import Service
from eventcam.core.modules.event.models import Event, EventStatus
from eventcam.core.modules.guest.models import GuestSession
from eventcam.core.modules.media.models import Media, MediaStatus, MediaView, UploadTicket
from eventcam.core.modules.media.paths import original_object_path, thumb_object_path
from eventcam.core.modules.media.validators import normalize_tags, validate_file_size, validate_file_type
from eventcam.core.modules.storage.models import StorageOperation
from eventcam.errors import EventNotJoinableError, NotFoundError, ValidationError
from eventcam.utils import now

logger = structlog.get_logger(__name__)


class MediaService(Service):
    """Guest uploads through capability URLs, and the organizer gallery."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("media")

    async def on_start(self) -> None:
        await self._collection.create_index([("event_id", 1), ("status", 1), ("created_at", -1)])
        await self._collection.create_index([("guest_session_id", 1), ("created_at", -1)])

    @property
    def bucket(self) -> str:
        return self.core.config.media_bucket

    async def create_upload(
        self, session: GuestSession, event: Event, file_type: str, file_size: int, tags: list[str]
    ) -> UploadTicket:
        """Register a pending upload and sign PUT URLs for it.

        URLs are signed before the row is written, so a signing failure leaves
        nothing behind.
        """
        config = self.core.config
        if event.status != EventStatus.ACTIVE:
            raise EventNotJoinableError(details={"status": event.status.value})
        file_type = validate_file_type(file_type)
        validate_file_size(file_size, config.guest_max_file_size)
        tags = normalize_tags(tags)
        if await self.count_reserved(session.id) >= config.guest_max_uploads:
            raise ValidationError("Upload limit reached for this device", details={"max_uploads": config.guest_max_uploads})

        media_id = uuid4()
        media = Media(
            id=media_id,
            event_id=event.id,
            guest_session_id=session.id,
            object_path=original_object_path(event.id, media_id, file_type),
            thumb_path=thumb_object_path(event.id, media_id) if file_type.startswith("image/") else None,
            file_type=file_type,
            file_size=file_size,
            tags=tags,
            uploader_name=session.display_name,
        )

        ttl = config.upload_url_ttl_seconds
        upload_url = self.core.storage.sign(self.bucket, media.object_path, StorageOperation.WRITE, ttl)
        thumb_upload_url = None
        if media.thumb_path is not None:
            thumb_upload_url = self.core.storage.sign(self.bucket, media.thumb_path, StorageOperation.WRITE, ttl)

        await self._collection.insert_one(media.to_mongo())
        logger.info("upload_created", event_id=str(event.id), media_id=str(media_id), file_type=file_type)
        return UploadTicket(media_id=media_id, upload_url=upload_url, thumb_upload_url=thumb_upload_url, expires_in=ttl)

    async def complete_upload(self, session: GuestSession, media_id: UUID) -> MediaView:
        """Confirm an upload once its object exists in storage.

        Completing twice is harmless. The device count is derived from media
        rows, so there is no separate counter to keep in step.

        Raises:
            NotFoundError: If the media does not belong to this device
            ValidationError: If the object is not in storage yet or the device is at its limit
        """
        doc = await self._collection.find_one({"_id": media_id, "guest_session_id": session.id})
        if doc is None:
            raise NotFoundError(f"Upload '{media_id}' not found")
        media = Media.model_validate(doc)
        if media.status == MediaStatus.UPLOADED:
            return self.to_view(media)

        limit = self.core.config.guest_max_uploads
        if await self.count_uploads(session.id) >= limit:
            raise ValidationError("Upload limit reached for this device", details={"max_uploads": limit})

        if not await self.core.storage.exists(self.bucket, media.object_path):
            raise ValidationError("Uploaded file was not found in storage")

        updated = await self._collection.find_one_and_update(
            {"_id": media_id, "status": MediaStatus.PENDING},
            {"$set": {"status": MediaStatus.UPLOADED, "uploaded_at": now()}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            # Completed concurrently by another request
            doc = await self._collection.find_one({"_id": media_id})
            if doc is None:
                raise NotFoundError(f"Upload '{media_id}' not found")
            return self.to_view(Media.model_validate(doc))

        logger.info("upload_completed", event_id=str(media.event_id), media_id=str(media_id))
        return self.to_view(Media.model_validate(updated))

    async def count_uploads(self, session_id: UUID) -> int:
        """Completed uploads of a device. Deleted media no longer count."""
        return await self._collection.count_documents({"guest_session_id": session_id, "status": MediaStatus.UPLOADED})

    async def count_reserved(self, session_id: UUID) -> int:
        """Completed uploads plus pending ones whose upload URL is still valid."""
        live_since = now() - timedelta(seconds=self.core.config.upload_url_ttl_seconds)
        pending = await self._collection.count_documents(
            {"guest_session_id": session_id, "status": MediaStatus.PENDING, "created_at": {"$gte": live_since}}
        )
        return await self.count_uploads(session_id) + pending

    async def list_guest_uploads(self, session: GuestSession) -> list[MediaView]:
        cursor = self._collection.find({"guest_session_id": session.id, "status": MediaStatus.UPLOADED}).sort(
            "created_at", -1
        )
        return [self.to_view(media) for media in await Media.list_cursor(cursor)]

    async def list_event_media(self, event: Event) -> list[MediaView]:
        cursor = self._collection.find({"event_id": event.id, "status": MediaStatus.UPLOADED}).sort("created_at", -1)
        return [self.to_view(media) for media in await Media.list_cursor(cursor)]

    async def delete_media(self, event: Event, media_id: UUID) -> None:
        """Delete the stored objects, then the row. The uploader gets the slot back."""
        doc = await self._collection.find_one({"_id": media_id, "event_id": event.id})
        if doc is None:
            raise NotFoundError(f"Media '{media_id}' not found")
        media = Media.model_validate(doc)

        await self.core.storage.delete(self.bucket, media.object_path)
        if media.thumb_path is not None:
            await self.core.storage.delete(self.bucket, media.thumb_path)
        await self._collection.delete_one({"_id": media_id})
        logger.info("media_deleted", event_id=str(event.id), media_id=str(media_id))

    def to_view(self, media: Media) -> MediaView:
        url = self.core.storage.sign(self.bucket, media.object_path, StorageOperation.READ)
        thumb_url = url
        if media.thumb_path is not None:
            thumb_url = self.core.storage.sign(self.bucket, media.thumb_path, StorageOperation.READ)
        return MediaView(
            media_id=media.id,
            file_type=media.file_type,
            file_size=media.file_size,
            tags=media.tags,
            uploader_name=media.uploader_name,
            status=media.status,
            url=url,
            thumb_url=thumb_url,
            created_at=media.created_at,
            uploaded_at=media.uploaded_at,
        )
