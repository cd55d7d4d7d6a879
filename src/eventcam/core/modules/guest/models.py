from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, Field

from eventcam.core.db import MongoModel
from eventcam.core.modules.event.models import EventSummary
from eventcam.utils import now

DeviceToken = NewType("DeviceToken", str)

MAX_DISPLAY_NAME_LENGTH = 60


class GuestSession(MongoModel):
    """Anonymous device session scoped to one event.

    Indexed on token_hash (unique) and event_id. Lifetime is bounded by the
    cookie, not by a TTL here.
    """

    event_id: UUID
    token_hash: str
    display_name: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    last_active_at: datetime = Field(default_factory=now)


class GuestSessionView(BaseModel):
    id: UUID = Field(..., description="Device session ID")
    display_name: str | None = Field(None, description="Name tag attached to new uploads")
    upload_count: int = Field(..., description="Completed uploads")
    max_uploads: int = Field(..., description="Upload cap for this device")


class GuestSessionPayload(BaseModel):
    session: GuestSessionView
    event: EventSummary
