"""Cached video endpoints.

This module provides endpoints for:
- Listing cached videos (newest first)
- Getting a single cached video
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from media_sync.api.dependencies import get_db_manager_dep
from media_sync.api.models.responses import VideoDetailResponse, VideoListResponse
from media_sync.core.constants import DEFAULT_LIMIT, DEFAULT_OFFSET, MAX_LIMIT
from media_sync.database.manager import MongoDBManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get(
    "",
    response_model=VideoListResponse,
    summary="List cached videos",
    description="List videos cached from the church channels, newest first.",
    operation_id="list_videos",
)
async def list_videos(
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(default=DEFAULT_OFFSET, ge=0),
    channel_id: str | None = Query(default=None, description="Filter by channel ID"),
    db: MongoDBManager = Depends(get_db_manager_dep),
) -> VideoListResponse:
    """List cached videos.

    Args:
        limit: Maximum results to return
        offset: Number of results to skip
        channel_id: Optional channel filter
        db: Database manager dependency

    Returns:
        VideoListResponse with the page of videos
    """
    videos = await db.list_videos(limit=limit, offset=offset, channel_id=channel_id)
    return VideoListResponse(
        count=len(videos),
        videos=videos,
        message="Videos fetched successfully" if videos else "No videos available yet",
    )


@router.get(
    "/{video_id}",
    response_model=VideoDetailResponse,
    summary="Get cached video",
    operation_id="get_video",
    responses={404: {"description": "Video not found"}},
)
async def get_video(
    video_id: str = Path(..., min_length=1, max_length=64, description="YouTube video ID"),
    db: MongoDBManager = Depends(get_db_manager_dep),
) -> VideoDetailResponse:
    """Get one cached video by its YouTube video ID."""
    video = await db.get_video(video_id)
    if video is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
    return VideoDetailResponse(video=video)
