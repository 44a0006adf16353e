"""Thin client for the YouTube Data API v3 endpoints used by channel sync."""

import logging
from typing import Any

import requests

from media_sync.core.config import Settings, get_settings
from media_sync.core.exceptions import YouTubeAPIError
from media_sync.core.http_session import get_session

logger = logging.getLogger(__name__)

SESSION_NAME = "youtube_api"


class YouTubeDataClient:
    """Blocking client for the search, videos and channels endpoints.

    Calls are bounded by ``timeout`` and never retried; a failed call raises
    ``YouTubeAPIError`` and the next sync pass is the retry.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        settings: Settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.youtube_api_key
        self.base_url = (base_url or settings.youtube_api_base_url).rstrip("/")
        self.timeout = timeout or settings.youtube_api_timeout
        self.session = session or get_session(SESSION_NAME, max_retries=0)

    def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"
        query = {**params, "key": self.api_key}

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            raise YouTubeAPIError(f"{endpoint} request failed: {e}") from e

        if response.status_code != 200:
            raise YouTubeAPIError(
                f"{endpoint} returned HTTP {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise YouTubeAPIError(f"{endpoint} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise YouTubeAPIError(f"{endpoint} returned unexpected payload")
        return data

    def search_channel_videos(self, channel_id: str, max_results: int) -> list[dict[str, Any]]:
        """Most recent videos of a channel, newest first."""
        data = self._get(
            "search",
            {
                "channelId": channel_id,
                "part": "snippet",
                "order": "date",
                "type": "video",
                "maxResults": max_results,
            },
        )
        return data.get("items") or []

    def get_video_status(self, video_ids: list[str]) -> list[dict[str, Any]]:
        """Status and content details for a batch of videos."""
        data = self._get(
            "videos",
            {
                "id": ",".join(video_ids),
                "part": "status,contentDetails",
                "maxResults": len(video_ids),
            },
        )
        return data.get("items") or []

    def get_channels_for_handle(self, handle: str) -> list[dict[str, Any]]:
        """Channels matching an ``@handle``."""
        data = self._get("channels", {"part": "id", "forHandle": handle})
        return data.get("items") or []

    def search_channels(self, query: str, max_results: int = 1) -> list[dict[str, Any]]:
        """Free-text channel search."""
        data = self._get(
            "search",
            {"part": "snippet", "q": query, "type": "channel", "maxResults": max_results},
        )
        return data.get("items") or []


def _error_message(response: requests.Response) -> str:
    """Extract the API error message from a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.reason or "unknown error"
