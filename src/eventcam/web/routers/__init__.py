from eventcam.web.routers.gallery import router as gallery_router
from eventcam.web.routers.guest import router as guest_router
from eventcam.web.routers.internal import router as internal_router
from eventcam.web.routers.organizer_auth import router as organizer_auth_router

__all__ = [
    "gallery_router",
    "guest_router",
    "internal_router",
    "organizer_auth_router",
]
