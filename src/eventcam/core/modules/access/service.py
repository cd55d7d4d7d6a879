from uuid import UUID

from eventcam.core.core import Service
from eventcam.core.modules.access.models import AuthMethod, OrganizerCredentials, Principal
from eventcam.core.modules.event.models import Event
from eventcam.errors import AccessDeniedError, AuthenticationError


class AccessService(Service):
    async def resolve_principal(self, credentials: OrganizerCredentials) -> Principal:
        """Resolve request credentials to exactly one principal.

        A bearer token always wins over a session cookie. Bearer calls are
        verified every time and never touch the session store.
        """
        if credentials.bearer_token:
            identity = await self.core.services.identity.verify(credentials.bearer_token)
            organizer = await self.core.services.organizer.ensure_organizer(identity)
            return Principal(
                organizer_id=organizer.id,
                email=organizer.email,
                name=organizer.name,
                auth_method=AuthMethod.BEARER,
            )

        if credentials.session_token:
            organizer, session = await self.core.services.session.resolve(credentials.session_token)
            return Principal(
                organizer_id=organizer.id,
                email=organizer.email,
                name=organizer.name,
                auth_method=AuthMethod.SESSION,
                session_expires_at=session.expires_at,
            )

        raise AuthenticationError("Missing organizer authentication")

    async def ensure_event_owner(self, principal: Principal, event_id: UUID) -> Event:
        """Ensure the principal owns the event."""
        event = await self.core.services.event.get_event(event_id)
        if event.organizer_id != principal.organizer_id:
            raise AccessDeniedError(f"Access denied: event '{event_id}' belongs to another organizer")
        return event
