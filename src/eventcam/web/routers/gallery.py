from uuid import UUID

from fastapi import APIRouter, Depends

from eventcam.core.modules.media.models import MediaView
from eventcam.web.deps import AppDep, PrincipalDep, enforce_csrf
from eventcam.web.openapi import ErrorResponse

router = APIRouter(prefix="/organizer", tags=["gallery"], dependencies=[Depends(enforce_csrf)])


@router.get(
    "/events/{event_id}/media",
    summary="List event media",
    description="List uploaded media of an event with short-lived download URLs (owner only).",
    operation_id="listEventMedia",
    responses={
        200: {"description": "Uploaded media, newest first"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the event owner"},
        404: {"model": ErrorResponse, "description": "Event not found"},
    },
)
async def list_event_media(event_id: UUID, app: AppDep, principal: PrincipalDep) -> list[MediaView]:
    return await app.get_event_media(principal, event_id)


@router.delete(
    "/events/{event_id}/media/{media_id}",
    summary="Delete event media",
    description="Delete one media item and its stored objects (owner only).",
    operation_id="deleteEventMedia",
    status_code=204,
    responses={
        204: {"description": "Media deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the event owner or CSRF check failed"},
        404: {"model": ErrorResponse, "description": "Event or media not found"},
        500: {"model": ErrorResponse, "description": "Storage delete failed"},
    },
)
async def delete_event_media(event_id: UUID, media_id: UUID, app: AppDep, principal: PrincipalDep) -> None:
    await app.delete_event_media(principal, event_id, media_id)
