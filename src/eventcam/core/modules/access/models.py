from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel


class AuthMethod(StrEnum):
    BEARER = "bearer"
    SESSION = "session"


class OrganizerCredentials(BaseModel):
    """Credentials extracted from one request, before verification."""

    bearer_token: str | None = None
    session_token: str | None = None


class Principal(BaseModel):
    """Organizer resolved for the lifetime of one request."""

    organizer_id: str
    email: str | None
    name: str | None
    auth_method: AuthMethod
    session_expires_at: datetime | None = None
