"""Pydantic schemas for the channel sync module."""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from media_sync.core.constants import CHANNEL_ID_PATTERN


class Channel(BaseModel):
    """A tracked YouTube channel, known by stable ID and/or handle."""

    id: str | None = None
    handle: str | None = None
    name: str

    @field_validator("id", "handle")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @model_validator(mode="after")
    def _require_identity(self) -> "Channel":
        if not self.id and not self.handle:
            raise ValueError(f"Channel {self.name!r} needs an id or a handle")
        return self

    @property
    def has_stable_id(self) -> bool:
        """Whether ``id`` already has the stable channel ID shape."""
        return bool(self.id and CHANNEL_ID_PATTERN.match(self.id))

    @property
    def label(self) -> str:
        """Handle if known, otherwise the ID."""
        return self.handle or self.id or ""


class VideoRecord(BaseModel):
    """A cached video, keyed by ``video_id``."""

    video_id: str
    title: str
    description: str | None = None
    thumbnail_url: str | None = None
    published_at: datetime | None = None
    channel_id: str

    def to_document(self) -> dict[str, Any]:
        """Convert to dict suitable for MongoDB storage."""
        data = self.model_dump()
        if self.published_at:
            data["published_at"] = self.published_at.isoformat()
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        return data


ChannelStatus = Literal["synced", "unresolved", "fetch_failed", "error"]


class ChannelOutcome(BaseModel):
    """Per-channel result of one sync pass."""

    channel_name: str
    channel_label: str
    channel_id: str | None = None
    status: ChannelStatus
    videos_fetched: int = 0
    videos_merged: int = 0
    videos_failed: int = 0
    error: str | None = None


class SyncResult(BaseModel):
    """Result of one sync pass across the channel registry."""

    total_merged: int = 0
    channels: list[ChannelOutcome] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def channels_failed(self) -> int:
        """Number of channels skipped because resolve or fetch failed."""
        return sum(1 for outcome in self.channels if outcome.status != "synced")

    @property
    def duration_seconds(self) -> float | None:
        """Wall-clock duration of the pass."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()
