import hmac
import secrets
from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from eventcam.core.core import Service
from eventcam.core.modules.event.models import Event, EventStatus, EventSummary
from eventcam.core.modules.guest.limiter import PinAttemptLimiter
from eventcam.core.modules.guest.models import DeviceToken, GuestSession, GuestSessionPayload, GuestSessionView
from eventcam.core.modules.guest.validators import normalize_display_name
from eventcam.errors import (
    AuthenticationError,
    EventNotJoinableError,
    InvalidPinError,
    NotFoundError,
    TooManyPinAttemptsError,
)
from eventcam.utils import hash_token, now

logger = structlog.get_logger(__name__)


def pin_matches(expected: str, presented: str | None) -> bool:
    if not presented:
        return False
    return hmac.compare_digest(presented.strip().encode("utf-8"), expected.encode("utf-8"))


class GuestService(Service):
    """Anonymous per-device guest sessions, one event each."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("guest_sessions")
        self._pin_limiter: PinAttemptLimiter | None = None

    async def on_start(self) -> None:
        await self._collection.create_index([("token_hash", 1)], unique=True)
        await self._collection.create_index([("event_id", 1)])

    @property
    def pin_limiter(self) -> PinAttemptLimiter:
        if self._pin_limiter is None:
            config = self.core.config
            self._pin_limiter = PinAttemptLimiter(config.pin_max_failed_attempts, config.pin_attempt_window_seconds)
        return self._pin_limiter

    async def lookup_event(self, slug: str) -> EventSummary:
        event = await self.core.services.event.get_event_by_slug(slug)
        return EventSummary.from_domain(event)

    async def join(
        self,
        slug: str,
        pin: str | None,
        display_name: str | None,
        device_token: str | None,
        client_key: str,
    ) -> tuple[DeviceToken, GuestSession, Event]:
        """Join an event, reusing the device's session for it when there is one.

        Raises:
            NotFoundError: If the event does not exist
            EventNotJoinableError: If the event is not active
            InvalidPinError: If a required PIN is missing or wrong
            TooManyPinAttemptsError: If this client failed the PIN too often
        """
        event = await self.core.services.event.get_event_by_slug(slug)
        if event.status != EventStatus.ACTIVE:
            raise EventNotJoinableError(details={"status": event.status.value})

        self._check_pin(event, pin, client_key)
        name = normalize_display_name(display_name)
        timestamp = now()

        if device_token:
            update: dict[str, Any] = {"last_active_at": timestamp}
            if name is not None:
                update |= {"display_name": name, "updated_at": timestamp}
            doc = await self._collection.find_one_and_update(
                {"token_hash": hash_token(device_token), "event_id": event.id},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )
            if doc is not None:
                session = GuestSession.model_validate(doc)
                logger.debug("guest_session_reused", event_id=str(event.id), session_id=str(session.id))
                return DeviceToken(device_token), session, event

        new_token = DeviceToken(secrets.token_hex(32))
        session = GuestSession(event_id=event.id, token_hash=hash_token(new_token), display_name=name)
        await self._collection.insert_one(session.to_mongo())
        logger.info("guest_session_created", event_id=str(event.id), session_id=str(session.id))
        return new_token, session, event

    def _check_pin(self, event: Event, pin: str | None, client_key: str) -> None:
        if not event.pin:
            return

        key = f"{event.id}:{client_key}"
        if self.pin_limiter.is_blocked(key):
            raise TooManyPinAttemptsError
        if not pin_matches(event.pin, pin):
            self.pin_limiter.record_failure(key)
            logger.info("guest_pin_rejected", event_id=str(event.id))
            raise InvalidPinError
        self.pin_limiter.reset(key)

    async def authenticate(self, device_token: str | None) -> tuple[GuestSession, Event]:
        """Resolve the device cookie to its session and event.

        Raises:
            AuthenticationError: If the cookie is missing or unknown
        """
        if not device_token:
            raise AuthenticationError("Guest session cookie is missing")

        doc = await self._collection.find_one_and_update(
            {"token_hash": hash_token(device_token)},
            {"$set": {"last_active_at": now()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise AuthenticationError("Guest session is missing or invalid")

        session = GuestSession.model_validate(doc)
        try:
            event = await self.core.services.event.get_event(session.event_id)
        except NotFoundError as e:
            raise AuthenticationError("Guest session is missing or invalid") from e
        return session, event

    async def update_name_tag(self, session: GuestSession, display_name: str | None) -> GuestSession:
        """Set or clear the name tag. Only uploads created afterwards carry it."""
        name = normalize_display_name(display_name)
        doc = await self._collection.find_one_and_update(
            {"_id": session.id},
            {"$set": {"display_name": name, "updated_at": now()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise AuthenticationError("Guest session is missing or invalid")
        return GuestSession.model_validate(doc)

    def build_payload(self, session: GuestSession, event: Event, upload_count: int) -> GuestSessionPayload:
        return GuestSessionPayload(
            session=GuestSessionView(
                id=session.id,
                display_name=session.display_name,
                upload_count=upload_count,
                max_uploads=self.core.config.guest_max_uploads,
            ),
            event=EventSummary.from_domain(event),
        )
