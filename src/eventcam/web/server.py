from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventcam.app import App
from eventcam.config import Config
from eventcam.errors import BackendError, UserError
from eventcam.web.error_handlers import (
    backend_error_handler,
    general_exception_handler,
    http_exception_handler,
    user_error_handler,
    validation_exception_handler,
)
from eventcam.web.middleware import RequestIdMiddleware
from eventcam.web.openapi import set_custom_openapi
from eventcam.web.routers import gallery_router, guest_router, internal_router, organizer_auth_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="EventCam API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )
    # Available before lifespan runs, so the test client can use them too
    app.state.app = app_instance
    app.state.config = config

    # Browser clients send credentials, so origins must be listed explicitly
    if config.trusted_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.trusted_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
            expose_headers=["X-Request-ID"],
        )
    app.add_middleware(RequestIdMiddleware)

    @app.get("/api/health")
    async def health_check(request: Request) -> dict[str, object]:
        return {"ok": True, "service": "eventcam-api", "request_id": request.state.request_id}

    app.include_router(organizer_auth_router, prefix="/api")
    app.include_router(gallery_router, prefix="/api")
    app.include_router(internal_router, prefix="/api")
    app.include_router(guest_router, prefix="/api")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
