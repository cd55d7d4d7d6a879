"""Organizer session models."""

from datetime import datetime
from typing import NewType

from pydantic import BaseModel, Field

from eventcam.core.db import MongoModel
from eventcam.core.modules.organizer.models import Organizer
from eventcam.utils import now

SessionToken = NewType("SessionToken", str)


class OrganizerSession(MongoModel):
    """Server-issued organizer session.

    Only the SHA-256 hex digest of the token is stored. Indexed on
    token_hash (unique), organizer_id and expires_at.
    """

    organizer_id: str
    token_hash: str
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime
    last_active_at: datetime = Field(default_factory=now)


class IssuedSession(BaseModel):
    """Result of a sign-in exchange. The raw token leaves the process only here."""

    session_token: SessionToken
    organizer: Organizer
    expires_at: datetime
