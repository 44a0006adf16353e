"""Response models for the video and admin endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from media_sync.channel.schemas import ChannelOutcome


class VideoListResponse(BaseModel):
    """Cached videos, newest first."""

    success: bool = Field(default=True, description="Request succeeded")
    count: int = Field(..., description="Number of videos in this page")
    videos: list[dict[str, Any]] = Field(default_factory=list, description="Video documents")
    message: str = Field(..., description="Human-readable summary")


class VideoDetailResponse(BaseModel):
    """A single cached video."""

    success: bool = Field(default=True)
    video: dict[str, Any] = Field(..., description="Video document")


class SyncTriggerResponse(BaseModel):
    """Outcome of a manually triggered sync pass."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True)
    message: str = Field(..., description="Human-readable summary")
    new_videos: int = Field(
        ...,
        alias="newVideos",
        ge=0,
        description="Videos merged (new or updated) during the pass",
    )
    channels: list[ChannelOutcome] = Field(
        default_factory=list,
        description="Per-channel breakdown, in registry order",
    )
