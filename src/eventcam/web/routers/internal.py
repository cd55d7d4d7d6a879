from fastapi import APIRouter

from eventcam.core.modules.event_status.models import EventStatusSyncResult
from eventcam.web.deps import AppDep, InternalKeyDep
from eventcam.web.openapi import ErrorResponse

router = APIRouter(prefix="/internal", tags=["internal"])


@router.post(
    "/event-status-sync",
    summary="Run event status sync",
    description="Run one event status tick now. Requires the X-Internal-Key header.",
    operation_id="syncEventStatuses",
    responses={
        401: {"model": ErrorResponse, "description": "Invalid internal key"},
        404: {"model": ErrorResponse, "description": "Internal endpoints disabled"},
    },
)
async def sync_event_statuses(app: AppDep, internal_key: InternalKeyDep) -> EventStatusSyncResult:
    return await app.sync_event_statuses(internal_key)
