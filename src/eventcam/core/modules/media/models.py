from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from eventcam.core.db import MongoModel
from eventcam.utils import now


class MediaStatus(StrEnum):
    PENDING = "pending"  # Upload URL issued, object not confirmed yet
    UPLOADED = "uploaded"


class Media(MongoModel):
    """One guest upload. `uploader_name` is the name tag at creation time."""

    event_id: UUID
    guest_session_id: UUID
    object_path: str
    thumb_path: str | None = None
    file_type: str
    file_size: int
    tags: list[str] = Field(default_factory=list)
    uploader_name: str | None = None
    status: MediaStatus = MediaStatus.PENDING
    created_at: datetime = Field(default_factory=now)
    uploaded_at: datetime | None = None


class UploadTicket(BaseModel):
    """Capability URLs for a direct-to-storage upload."""

    media_id: UUID = Field(..., description="Media ID to pass to complete-upload")
    upload_url: str = Field(..., description="Signed PUT URL for the original file")
    thumb_upload_url: str | None = Field(None, description="Signed PUT URL for an optional thumbnail")
    expires_in: int = Field(..., description="URL lifetime in seconds")


class MediaView(BaseModel):
    media_id: UUID
    file_type: str
    file_size: int
    tags: list[str]
    uploader_name: str | None
    status: MediaStatus
    url: str = Field(..., description="Signed GET URL for the original")
    thumb_url: str = Field(..., description="Signed GET URL for the thumbnail, or the original")
    created_at: datetime
    uploaded_at: datetime | None
