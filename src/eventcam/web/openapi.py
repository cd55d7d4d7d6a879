from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from eventcam.web.cookies import DEVICE_SESSION_COOKIE_NAME, ORGANIZER_SESSION_COOKIE_NAME


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="EventCam API",
            version="0.1.0",
            summary="Guest photo collection for live events",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Identity provider access token (organizers)",
            },
            "OrganizerSessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": ORGANIZER_SESSION_COOKIE_NAME,
                "description": "Organizer session issued by POST /api/organizer/auth/session",
            },
            "DeviceSessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": DEVICE_SESSION_COOKIE_NAME,
                "description": "Guest device session issued by POST /api/join",
            },
        }

        for path, path_item in openapi_schema["paths"].items():
            for operation in path_item.values():
                if path.startswith("/api/organizer/"):
                    operation["security"] = [{"BearerAuth": []}, {"OrganizerSessionCookie": []}]
                elif path in {"/api/my-session", "/api/create-upload", "/api/complete-upload", "/api/my-uploads"}:
                    operation["security"] = [{"DeviceSessionCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorBody(BaseModel):
    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    request_id: str | None = Field(None, description="Request id for log correlation")
    details: dict[str, Any] = Field(default_factory=dict, description="Extra error context")


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: ErrorBody

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": {"code": "UNAUTHORIZED", "message": "Authentication failed", "request_id": "…", "details": {}}},
                {"error": {"code": "INVALID_PIN", "message": "A valid event PIN is required", "request_id": "…", "details": {}}},
            ]
        }
    }
