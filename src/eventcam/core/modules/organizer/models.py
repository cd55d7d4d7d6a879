from datetime import datetime

from pydantic import BaseModel, Field

from eventcam.core.db import ExternalKeyModel
from eventcam.utils import now


class Organizer(ExternalKeyModel):
    """Organizer account keyed by the identity provider's stable user id."""

    email: str | None = None
    name: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class OrganizerView(BaseModel):
    """Organizer account information (API representation)."""

    id: str = Field(..., description="Organizer ID")
    email: str | None = Field(None, description="Email address")
    name: str | None = Field(None, description="Display name")

    @classmethod
    def from_domain(cls, organizer: Organizer) -> "OrganizerView":
        return cls(id=organizer.id, email=organizer.email, name=organizer.name)
