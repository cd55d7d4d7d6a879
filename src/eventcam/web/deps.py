from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from eventcam.app import App
from eventcam.config import Config
from eventcam.core.modules.access.models import OrganizerCredentials, Principal
from eventcam.web.cookies import DEVICE_SESSION_COOKIE_NAME, ORGANIZER_SESSION_COOKIE_NAME

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
organizer_cookie_scheme = APIKeyCookie(name=ORGANIZER_SESSION_COOKIE_NAME, auto_error=False)
device_cookie_scheme = APIKeyCookie(name=DEVICE_SESSION_COOKIE_NAME, auto_error=False)
internal_key_scheme = APIKeyHeader(name="X-Internal-Key", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_organizer_credentials(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    session_cookie: Annotated[str | None, Depends(organizer_cookie_scheme)] = None,
) -> OrganizerCredentials:
    """Collect the bearer token and session cookie without verifying either."""
    bearer_token = None
    if credentials and credentials.scheme.lower() == "bearer":
        bearer_token = credentials.credentials.strip() or None
    session_token = session_cookie.strip() if session_cookie else None
    return OrganizerCredentials(bearer_token=bearer_token, session_token=session_token or None)


async def enforce_csrf(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[OrganizerCredentials, Depends(get_organizer_credentials)],
) -> None:
    """Origin check for cookie-authenticated mutations, run before auth resolution."""
    app.check_csrf(request.method, request.headers.get("origin"), request.headers.get("referer"), credentials)


async def get_principal(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[OrganizerCredentials, Depends(get_organizer_credentials)],
) -> Principal:
    """Resolve the organizer for this request (bearer first, then session cookie)."""
    return await app.resolve_principal(credentials)


async def get_device_token(token: Annotated[str | None, Depends(device_cookie_scheme)] = None) -> str | None:
    if token and token.strip():
        return token.strip()
    return None


async def get_client_key(request: Request) -> str:
    """Key used to throttle PIN attempts per client."""
    return request.client.host if request.client else "unknown"


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
OrganizerCredentialsDep = Annotated[OrganizerCredentials, Depends(get_organizer_credentials)]
PrincipalDep = Annotated[Principal, Depends(get_principal)]
DeviceTokenDep = Annotated[str | None, Depends(get_device_token)]
ClientKeyDep = Annotated[str, Depends(get_client_key)]
InternalKeyDep = Annotated[str | None, Depends(internal_key_scheme)]
