from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response
from pydantic import BaseModel, Field

from eventcam.core.modules.access.models import AuthMethod
from eventcam.core.modules.organizer.models import OrganizerView
from eventcam.web.cookies import clear_organizer_session_cookie, set_organizer_session_cookie
from eventcam.web.deps import AppDep, ConfigDep, OrganizerCredentialsDep, PrincipalDep, enforce_csrf
from eventcam.web.openapi import ErrorResponse

router = APIRouter(prefix="/organizer", tags=["organizer-auth"], dependencies=[Depends(enforce_csrf)])


class SessionExchangeResponse(BaseModel):
    """Organizer session created from an identity-provider token."""

    organizer: OrganizerView
    expires_at: datetime = Field(..., description="Session expiry")
    session_token: str = Field(..., description="Opaque session token, also set as an HttpOnly cookie")


class SessionInfo(BaseModel):
    auth_method: AuthMethod = Field(..., description="How this request was authenticated")
    expires_at: datetime | None = Field(None, description="Session expiry, null for bearer requests")


class CurrentSessionResponse(BaseModel):
    organizer: OrganizerView
    auth_method: AuthMethod
    session: SessionInfo


@router.post(
    "/auth/session",
    summary="Create organizer session",
    description="Exchange an identity-provider bearer token for a server session cookie.",
    operation_id="createOrganizerSession",
    responses={
        200: {"description": "Session created"},
        401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
        403: {"model": ErrorResponse, "description": "CSRF check failed"},
    },
)
async def create_session(
    app: AppDep,
    config: ConfigDep,
    credentials: OrganizerCredentialsDep,
    response: Response,
    user_agent: Annotated[str | None, Header()] = None,
) -> SessionExchangeResponse:
    issued = await app.create_organizer_session(credentials.bearer_token, user_agent)
    set_organizer_session_cookie(response, issued.session_token, config)
    return SessionExchangeResponse(
        organizer=OrganizerView.from_domain(issued.organizer),
        expires_at=issued.expires_at,
        session_token=issued.session_token,
    )


@router.get(
    "/auth/session",
    summary="Get current organizer session",
    description="Resolve the bearer token or session cookie and describe the current organizer.",
    operation_id="getOrganizerSession",
    responses={
        200: {"description": "Current organizer"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_session(principal: PrincipalDep) -> CurrentSessionResponse:
    return CurrentSessionResponse(
        organizer=OrganizerView(id=principal.organizer_id, email=principal.email, name=principal.name),
        auth_method=principal.auth_method,
        session=SessionInfo(auth_method=principal.auth_method, expires_at=principal.session_expires_at),
    )


@router.delete(
    "/auth/session",
    summary="End organizer session",
    description="Revoke the session cookie, if any, and clear it. Always succeeds.",
    operation_id="deleteOrganizerSession",
    status_code=204,
    responses={
        204: {"description": "Session revoked"},
        403: {"model": ErrorResponse, "description": "CSRF check failed"},
    },
)
async def delete_session(app: AppDep, config: ConfigDep, credentials: OrganizerCredentialsDep, response: Response) -> None:
    await app.revoke_organizer_session(credentials.session_token)
    clear_organizer_session_cookie(response, config)
