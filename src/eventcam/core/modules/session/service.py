import secrets
from datetime import timedelta
from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from eventcam.core.core import Service
from eventcam.core.modules.identity.models import Identity
from eventcam.core.modules.organizer.models import Organizer
from eventcam.core.modules.session.models import IssuedSession, OrganizerSession, SessionToken
from eventcam.errors import AuthenticationError, WriteFailedError
from eventcam.utils import hash_token, now

logger = structlog.get_logger(__name__)


def generate_session_token() -> SessionToken:
    """64 hex chars from 32 random bytes."""
    return SessionToken(secrets.token_hex(32))


class SessionService(Service):
    """Issues, resolves and revokes hashed organizer sessions.

    Expiry is lazy: an expired row simply stops matching on resolve.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("organizer_sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("token_hash", 1)], unique=True)
        await self._collection.create_index([("organizer_id", 1)])
        await self._collection.create_index([("expires_at", 1)])

    async def issue(self, identity: Identity, user_agent: str | None = None) -> IssuedSession:
        """Create a session for a verified identity.

        Raises:
            AuthenticationError: If the identity has no email
            WriteFailedError: If the session row was not written
        """
        if not identity.email:
            raise AuthenticationError("Organizer account email is required")

        organizer = await self.core.services.organizer.ensure_organizer(identity)

        session_token = generate_session_token()
        created_at = now()
        session = OrganizerSession(
            organizer_id=organizer.id,
            token_hash=hash_token(session_token),
            user_agent=user_agent,
            created_at=created_at,
            expires_at=created_at + timedelta(days=self.core.config.organizer_session_ttl_days),
            last_active_at=created_at,
        )
        result = await self._collection.insert_one(session.to_mongo())
        if not result.acknowledged or result.inserted_id is None:
            raise WriteFailedError("Failed to create organizer session")

        logger.info("organizer_session_issued", organizer_id=organizer.id, session_id=str(session.id))
        return IssuedSession(session_token=session_token, organizer=organizer, expires_at=session.expires_at)

    async def resolve(self, session_token: str) -> tuple[Organizer, OrganizerSession]:
        """Look up a live session and touch its activity time in one operation.

        Raises:
            AuthenticationError: If the session is missing, expired or invalid
        """
        timestamp = now()
        doc = await self._collection.find_one_and_update(
            {"token_hash": hash_token(session_token), "expires_at": {"$gt": timestamp}},
            {"$set": {"last_active_at": timestamp}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise AuthenticationError("Organizer session is missing, expired, or invalid")

        session = OrganizerSession.model_validate(doc)
        organizer = await self.core.services.organizer.find_organizer(session.organizer_id)
        if organizer is None:
            raise AuthenticationError("Organizer session is missing, expired, or invalid")
        return organizer, session

    async def revoke(self, session_token: str) -> None:
        """Delete a session by token. Unknown tokens are ignored."""
        result = await self._collection.delete_one({"token_hash": hash_token(session_token)})
        if result.deleted_count:
            logger.info("organizer_session_revoked")
