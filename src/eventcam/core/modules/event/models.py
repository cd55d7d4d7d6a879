from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from eventcam.core.db import MongoModel
from eventcam.utils import now


class EventStatus(StrEnum):
    """Lifecycle: draft -> active -> closed. Closed is terminal."""

    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class Event(MongoModel):
    """Event owned by an organizer. Only `status` is changed by this service."""

    slug: str
    name: str
    organizer_id: str
    event_date: datetime
    end_date: datetime
    status: EventStatus = EventStatus.DRAFT
    pin: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @property
    def requires_pin(self) -> bool:
        return bool(self.pin)


class EventSummary(BaseModel):
    """Public event information shown to guests."""

    id: UUID = Field(..., description="Event ID")
    slug: str = Field(..., description="Event slug")
    name: str = Field(..., description="Event name")
    status: EventStatus = Field(..., description="Current lifecycle status")
    requires_pin: bool = Field(..., description="Whether joining requires a PIN")

    @classmethod
    def from_domain(cls, event: Event) -> "EventSummary":
        return cls(id=event.id, slug=event.slug, name=event.name, status=event.status, requires_pin=event.requires_pin)
