import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from eventcam.config import Config
from eventcam.core.core import Core
from eventcam.core.modules.access.models import OrganizerCredentials, Principal
from eventcam.core.modules.event.models import Event, EventSummary
from eventcam.core.modules.event_status.models import EventStatusSyncResult
from eventcam.core.modules.guest.models import DeviceToken, GuestSession, GuestSessionPayload
from eventcam.core.modules.media.models import MediaView, UploadTicket
from eventcam.core.modules.session.models import IssuedSession
from eventcam.errors import AuthenticationError, NotFoundError


class App:
    """Facade for all application operations, checks credentials before delegating to Core."""

    def __init__(self, config: Config, core: Core | None = None) -> None:
        self._core = core if core is not None else Core(config)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Organizer authentication ===
    def check_csrf(self, method: str, origin: str | None, referer: str | None, credentials: OrganizerCredentials) -> None:
        """Reject cookie-authenticated mutations from untrusted origins."""
        self._core.services.csrf.check(
            method,
            origin,
            referer,
            has_bearer=bool(credentials.bearer_token),
            has_session_cookie=bool(credentials.session_token),
        )

    async def resolve_principal(self, credentials: OrganizerCredentials) -> Principal:
        """Resolve bearer token or session cookie to the current organizer."""
        return await self._core.services.access.resolve_principal(credentials)

    async def create_organizer_session(self, bearer_token: str | None, user_agent: str | None) -> IssuedSession:
        """Exchange an identity-provider bearer token for a server session."""
        if not bearer_token:
            raise AuthenticationError("Missing organizer bearer token")
        identity = await self._core.services.identity.verify(bearer_token)
        return await self._core.services.session.issue(identity, user_agent)

    async def revoke_organizer_session(self, session_token: str | None) -> None:
        """Revoke the session behind a cookie token, if any."""
        if session_token:
            await self._core.services.session.revoke(session_token)

    # === Organizer gallery ===
    async def get_event_media(self, principal: Principal, event_id: UUID) -> list[MediaView]:
        """List uploaded media of an event (owner only)."""
        event = await self._core.services.access.ensure_event_owner(principal, event_id)
        return await self._core.services.media.list_event_media(event)

    async def delete_event_media(self, principal: Principal, event_id: UUID, media_id: UUID) -> None:
        """Delete one media item and its stored objects (owner only)."""
        event = await self._core.services.access.ensure_event_owner(principal, event_id)
        await self._core.services.media.delete_media(event, media_id)

    # === Guests ===
    async def lookup_event(self, slug: str) -> EventSummary:
        """Public summary of an event for the join screen."""
        return await self._core.services.guest.lookup_event(slug)

    async def join_event(
        self,
        slug: str,
        pin: str | None,
        display_name: str | None,
        device_token: str | None,
        client_key: str,
    ) -> tuple[DeviceToken, GuestSessionPayload]:
        """Join an event as a guest, returning the device token to store in the cookie."""
        token, session, event = await self._core.services.guest.join(slug, pin, display_name, device_token, client_key)
        return token, await self._session_payload(session, event)

    async def get_guest_session(self, device_token: str | None) -> GuestSessionPayload:
        """Get the current device session."""
        session, event = await self._core.services.guest.authenticate(device_token)
        return await self._session_payload(session, event)

    async def update_guest_name_tag(self, device_token: str | None, display_name: str | None) -> GuestSessionPayload:
        """Set or clear the name tag attached to future uploads."""
        session, event = await self._core.services.guest.authenticate(device_token)
        session = await self._core.services.guest.update_name_tag(session, display_name)
        return await self._session_payload(session, event)

    async def create_upload(self, device_token: str | None, file_type: str, file_size: int, tags: list[str]) -> UploadTicket:
        """Issue capability URLs for a direct upload."""
        session, event = await self._core.services.guest.authenticate(device_token)
        return await self._core.services.media.create_upload(session, event, file_type, file_size, tags)

    async def complete_upload(self, device_token: str | None, media_id: UUID) -> MediaView:
        """Confirm a direct upload."""
        session, _ = await self._core.services.guest.authenticate(device_token)
        return await self._core.services.media.complete_upload(session, media_id)

    async def get_my_uploads(self, device_token: str | None) -> list[MediaView]:
        """List completed uploads of this device."""
        session, _ = await self._core.services.guest.authenticate(device_token)
        return await self._core.services.media.list_guest_uploads(session)

    async def _session_payload(self, session: GuestSession, event: Event) -> GuestSessionPayload:
        upload_count = await self._core.services.media.count_uploads(session.id)
        return self._core.services.guest.build_payload(session, event, upload_count)

    # === Internal ===
    async def sync_event_statuses(self, internal_key: str | None) -> EventStatusSyncResult:
        """Run one event status tick on demand."""
        expected = self._core.config.internal_api_key
        if not expected:
            raise NotFoundError("Internal endpoints are disabled")
        if not internal_key or not secrets.compare_digest(internal_key, expected):
            raise AuthenticationError("Invalid internal API key")
        return await self._core.services.event_status.sync_once()
