"""API models module."""

from media_sync.api.models.errors import ErrorCodes, ErrorResponse
from media_sync.api.models.responses import (
    SyncTriggerResponse,
    VideoDetailResponse,
    VideoListResponse,
)

__all__ = [
    "ErrorCodes",
    "ErrorResponse",
    "SyncTriggerResponse",
    "VideoDetailResponse",
    "VideoListResponse",
]
