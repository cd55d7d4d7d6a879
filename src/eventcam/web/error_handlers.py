from typing import Any

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventcam.errors import BackendError, UserError

logger = structlog.get_logger(__name__)


def create_json_error_response(
    request: Request, status_code: int, code: str, message: str, details: dict[str, Any] | None = None
) -> JSONResponse:
    """Create the uniform error envelope."""
    content = {
        "error": {
            "code": code,
            "message": message,
            "request_id": getattr(request.state, "request_id", None),
            "details": details or {},
        }
    }
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with their own status and code."""
    if not isinstance(exc, UserError):
        return await general_exception_handler(request, exc)
    return create_json_error_response(request, exc.status_code, exc.code, str(exc), exc.details)


async def backend_error_handler(request: Request, exc: Exception) -> Response:
    """Handle collaborator faults: log the cause, never return it."""
    if not isinstance(exc, BackendError):
        return await general_exception_handler(request, exc)
    logger.error("backend_error", code=exc.code, message=str(exc), cause=exc.cause_message)
    return create_json_error_response(request, exc.status_code, exc.code, str(exc))


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle routing errors raised by Starlette (unknown route, wrong method)."""
    if not isinstance(exc, StarletteHTTPException):
        return await general_exception_handler(request, exc)
    if exc.status_code == 404:
        return create_json_error_response(
            request, 404, "NOT_FOUND", f"Route {request.method} {request.url.path} was not found"
        )
    if exc.status_code == 405:
        return create_json_error_response(request, 405, "METHOD_NOT_ALLOWED", "Method not allowed")
    return create_json_error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


async def validation_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle request body and parameter validation errors (400)."""
    if not isinstance(exc, RequestValidationError):
        return await general_exception_handler(request, exc)
    errors = [{"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]} for error in exc.errors()]
    return create_json_error_response(request, 400, "VALIDATION_ERROR", "Invalid request", {"errors": errors})


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", error=str(exc))
    return create_json_error_response(request, 500, "INTERNAL_SERVER_ERROR", "Unexpected server error")
