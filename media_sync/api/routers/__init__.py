"""API routers module."""

from media_sync.api.routers.admin import router as admin_router
from media_sync.api.routers.health import router as health_router
from media_sync.api.routers.videos import router as videos_router

__all__ = [
    "videos_router",
    "admin_router",
    "health_router",
]
