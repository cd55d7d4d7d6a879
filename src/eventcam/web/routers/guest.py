from uuid import UUID

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from eventcam.core.modules.event.models import EventSummary
from eventcam.core.modules.guest.models import GuestSessionPayload
from eventcam.core.modules.media.models import MediaView, UploadTicket
from eventcam.web.cookies import set_device_session_cookie
from eventcam.web.deps import AppDep, ClientKeyDep, ConfigDep, DeviceTokenDep
from eventcam.web.openapi import ErrorResponse

router = APIRouter(tags=["guest"])


class LookupEventRequest(BaseModel):
    event_slug: str = Field(..., min_length=1, max_length=100, description="Event slug from the invite link")


class LookupEventResponse(BaseModel):
    event: EventSummary


class JoinEventRequest(BaseModel):
    event_slug: str = Field(..., min_length=1, max_length=100, description="Event slug from the invite link")
    pin: str | None = Field(None, max_length=32, description="Event PIN, when the event requires one")
    display_name: str | None = Field(None, max_length=200, description="Optional name tag")


class UpdateSessionRequest(BaseModel):
    display_name: str | None = Field(None, max_length=200, description="New name tag, blank or null clears it")


class CreateUploadRequest(BaseModel):
    file_type: str = Field(..., min_length=1, max_length=100, description="MIME type of the file")
    file_size: int = Field(..., description="File size in bytes")
    tags: list[str] = Field(default_factory=list, description="Free-text tags")


class CompleteUploadRequest(BaseModel):
    media_id: UUID = Field(..., description="Media ID returned by create-upload")


class MyUploadsResponse(BaseModel):
    uploads: list[MediaView]


@router.post(
    "/lookup-event",
    summary="Look up event",
    description="Public event summary for the join screen.",
    operation_id="lookupEvent",
    responses={404: {"model": ErrorResponse, "description": "Event not found"}},
)
async def lookup_event(request: LookupEventRequest, app: AppDep) -> LookupEventResponse:
    return LookupEventResponse(event=await app.lookup_event(request.event_slug))


@router.post(
    "/join",
    summary="Join event",
    description="Join an event as a guest. Sets the device session cookie.",
    operation_id="joinEvent",
    responses={
        200: {"description": "Joined, device session cookie set"},
        403: {"model": ErrorResponse, "description": "PIN required or wrong (INVALID_PIN)"},
        404: {"model": ErrorResponse, "description": "Event not found"},
        409: {"model": ErrorResponse, "description": "Event is not active"},
        429: {"model": ErrorResponse, "description": "Too many PIN attempts"},
    },
)
async def join_event(
    request: JoinEventRequest,
    app: AppDep,
    config: ConfigDep,
    device_token: DeviceTokenDep,
    client_key: ClientKeyDep,
    response: Response,
) -> GuestSessionPayload:
    token, payload = await app.join_event(request.event_slug, request.pin, request.display_name, device_token, client_key)
    set_device_session_cookie(response, token, config)
    return payload


@router.get(
    "/my-session",
    summary="Get guest session",
    operation_id="getMySession",
    responses={401: {"model": ErrorResponse, "description": "Device session cookie missing or invalid"}},
)
async def get_my_session(app: AppDep, device_token: DeviceTokenDep) -> GuestSessionPayload:
    return await app.get_guest_session(device_token)


@router.patch(
    "/my-session",
    summary="Update name tag",
    description="Set or clear the name tag attached to uploads created from now on.",
    operation_id="patchMySession",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid name tag"},
        401: {"model": ErrorResponse, "description": "Device session cookie missing or invalid"},
    },
)
async def patch_my_session(request: UpdateSessionRequest, app: AppDep, device_token: DeviceTokenDep) -> GuestSessionPayload:
    return await app.update_guest_name_tag(device_token, request.display_name)


@router.post(
    "/create-upload",
    summary="Create upload",
    description="Get short-lived PUT URLs for uploading one file directly to storage.",
    operation_id="createUpload",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid file or upload limit reached"},
        401: {"model": ErrorResponse, "description": "Device session cookie missing or invalid"},
        409: {"model": ErrorResponse, "description": "Event is not active"},
        500: {"model": ErrorResponse, "description": "Storage signing failed"},
    },
)
async def create_upload(request: CreateUploadRequest, app: AppDep, device_token: DeviceTokenDep) -> UploadTicket:
    return await app.create_upload(device_token, request.file_type, request.file_size, request.tags)


@router.post(
    "/complete-upload",
    summary="Complete upload",
    description="Confirm that a file was uploaded to its capability URL.",
    operation_id="completeUpload",
    responses={
        400: {"model": ErrorResponse, "description": "File not found in storage"},
        401: {"model": ErrorResponse, "description": "Device session cookie missing or invalid"},
        404: {"model": ErrorResponse, "description": "Upload not found"},
        500: {"model": ErrorResponse, "description": "Storage check failed"},
    },
)
async def complete_upload(request: CompleteUploadRequest, app: AppDep, device_token: DeviceTokenDep) -> MediaView:
    return await app.complete_upload(device_token, request.media_id)


@router.get(
    "/my-uploads",
    summary="List my uploads",
    operation_id="getMyUploads",
    responses={401: {"model": ErrorResponse, "description": "Device session cookie missing or invalid"}},
)
async def get_my_uploads(app: AppDep, device_token: DeviceTokenDep) -> MyUploadsResponse:
    return MyUploadsResponse(uploads=await app.get_my_uploads(device_token))
