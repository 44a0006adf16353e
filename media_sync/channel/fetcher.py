"""Video fetcher - recent, embeddable, public videos of a channel."""

import asyncio
import logging
from datetime import datetime
from typing import Any

from media_sync.core.constants import DEFAULT_MAX_RESULTS, PUBLIC_PRIVACY_STATUS
from media_sync.core.exceptions import FetchError, YouTubeAPIError

from .schemas import VideoRecord
from .youtube_api import YouTubeDataClient

logger = logging.getLogger(__name__)


def is_eligible(video: dict[str, Any]) -> bool:
    """Check if a video can be played in the app (embeddable and public)."""
    status = video.get("status") or {}
    return bool(status.get("embeddable")) and status.get("privacyStatus") == PUBLIC_PRIVACY_STATUS


def _parse_published_at(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp from the API."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable publishedAt: %s", value)
        return None


def _thumbnail_url(snippet: dict[str, Any]) -> str | None:
    thumbnails = snippet.get("thumbnails") or {}
    for size in ("high", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


def to_video_record(item: dict[str, Any], channel_id: str) -> VideoRecord:
    """
    Map a search result item to a VideoRecord.

    Args:
        item: Search API item with ``id.videoId`` and ``snippet``
        channel_id: Stable channel ID the item was fetched for

    Returns:
        VideoRecord keyed by the stable channel ID
    """
    snippet = item.get("snippet") or {}
    return VideoRecord(
        video_id=item["id"]["videoId"],
        title=snippet.get("title") or "",
        description=snippet.get("description"),
        thumbnail_url=_thumbnail_url(snippet),
        published_at=_parse_published_at(snippet.get("publishedAt")),
        channel_id=channel_id,
    )


class VideoFetcher:
    """Fetch a channel's most recent eligible videos."""

    def __init__(self, client: YouTubeDataClient | None = None) -> None:
        self.client = client or YouTubeDataClient()

    def fetch_sync(self, channel_id: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[VideoRecord]:
        """
        Fetch eligible videos, newest first (blocking).

        Args:
            channel_id: Stable channel ID
            max_results: Maximum number of recent videos to request

        Returns:
            Eligible VideoRecords in publish-date-descending order

        Raises:
            FetchError: If either API call fails
        """
        try:
            items = self.client.search_channel_videos(channel_id, max_results)
        except YouTubeAPIError as e:
            raise FetchError(channel_id, f"search failed: {e}") from e

        if not all(isinstance(item, dict) and isinstance(item.get("id"), dict) for item in items):
            raise FetchError(channel_id, "malformed search item: missing id object")

        items = [item for item in items if item["id"].get("videoId")]
        if not items:
            return []

        video_ids = [item["id"]["videoId"] for item in items]
        try:
            statuses = self.client.get_video_status(video_ids)
        except YouTubeAPIError as e:
            raise FetchError(channel_id, f"status lookup failed: {e}") from e

        eligible_ids = {video.get("id") for video in statuses if is_eligible(video)}
        dropped = len(video_ids) - len(eligible_ids & set(video_ids))
        if dropped:
            logger.debug("Dropped %d ineligible videos for %s", dropped, channel_id)

        try:
            return [
                to_video_record(item, channel_id)
                for item in items
                if item["id"]["videoId"] in eligible_ids
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(channel_id, f"malformed search item: {e}") from e

    async def fetch(self, channel_id: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[VideoRecord]:
        """Fetch eligible videos without blocking the event loop."""
        return await asyncio.to_thread(self.fetch_sync, channel_id, max_results)
