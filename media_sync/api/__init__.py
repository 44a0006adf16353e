"""REST API module for the church media backend."""

from media_sync.api.app import create_app
from media_sync.api.routers import admin_router, health_router, videos_router

__all__ = [
    "create_app",
    "videos_router",
    "admin_router",
    "health_router",
]
