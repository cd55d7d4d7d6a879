from typing import Any

import httpx
import structlog

from eventcam.core.core import Service
from eventcam.core.modules.identity.models import Identity
from eventcam.errors import AuthenticationError

logger = structlog.get_logger(__name__)


def parse_identity(payload: Any) -> Identity:
    """Normalize the provider's user payload.

    Raises:
        AuthenticationError: If the payload does not carry a user id
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("id"), str) or not payload["id"]:
        raise AuthenticationError("Invalid organizer bearer token")

    metadata = payload.get("user_metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    email = payload.get("email")
    name = metadata.get("name") or metadata.get("full_name")
    return Identity(
        id=payload["id"],
        email=email if isinstance(email, str) and email else None,
        name=name if isinstance(name, str) and name.strip() else None,
    )


class IdentityService(Service):
    """Verifies bearer tokens against the external identity provider.

    Fails closed and never retries: a bad credential will not become good.
    """

    async def verify(self, bearer_token: str) -> Identity:
        """Resolve a bearer token to an identity or raise AuthenticationError."""
        config = self.core.config
        url = f"{config.identity_provider_url.rstrip('/')}/auth/v1/user"
        try:
            response = await self.core.http_client.get(
                url,
                headers={"apikey": config.identity_provider_key, "Authorization": f"Bearer {bearer_token}"},
            )
        except httpx.HTTPError as e:
            logger.warning("identity_provider_unreachable", error=str(e))
            raise AuthenticationError("Invalid organizer bearer token") from e

        if not response.is_success:
            logger.info("identity_token_rejected", status_code=response.status_code)
            raise AuthenticationError("Invalid organizer bearer token")

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("identity_provider_bad_payload")
            raise AuthenticationError("Invalid organizer bearer token") from e
        return parse_identity(payload)
