"""Pytest fixtures and test doubles for the sync engine.

This module provides:
- An in-memory YouTube Data API client double
- An in-memory video store with atomic upsert-by-key semantics
- Settings and FastAPI application fixtures
"""

import asyncio
import copy
from collections.abc import Generator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pymongo.errors import OperationFailure

from media_sync.api.app import create_app
from media_sync.channel.cache import VideoCache
from media_sync.channel.fetcher import VideoFetcher
from media_sync.channel.resolver import HandleResolver
from media_sync.channel.schemas import Channel
from media_sync.channel.sync import SyncOrchestrator
from media_sync.core.config import Settings
from media_sync.core.exceptions import YouTubeAPIError

TEST_API_KEY = "test-admin-key-123"


# =============================================================================
# Sample data helpers
# =============================================================================


def search_item(video_id: str, title: str | None = None, published_at: str = "2024-05-01T10:00:00Z") -> dict[str, Any]:
    """Build a search API item as returned by ``search?type=video``."""
    return {
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {
            "title": title or f"Sermon {video_id}",
            "description": f"Description of {video_id}",
            "publishedAt": published_at,
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
            },
        },
    }


def video_status(video_id: str, embeddable: bool = True, privacy: str = "public") -> dict[str, Any]:
    """Build a videos API item with status flags."""
    return {
        "id": video_id,
        "status": {"embeddable": embeddable, "privacyStatus": privacy},
        "contentDetails": {"duration": "PT45M"},
    }


# =============================================================================
# Test doubles
# =============================================================================


class FakeYouTubeClient:
    """In-memory stand-in for YouTubeDataClient.

    Each mapping value is either the items to return or an exception to raise.
    """

    def __init__(
        self,
        channel_videos: dict[str, list[dict[str, Any]] | Exception] | None = None,
        statuses: dict[str, dict[str, Any]] | None = None,
        handles: dict[str, list[dict[str, Any]] | Exception] | None = None,
        channel_search: dict[str, list[dict[str, Any]] | Exception] | None = None,
        status_error: Exception | None = None,
    ) -> None:
        self.channel_videos = channel_videos or {}
        self.statuses = statuses or {}
        self.handles = handles or {}
        self.channel_search = channel_search or {}
        self.status_error = status_error
        self.calls: list[tuple[str, Any]] = []

    @staticmethod
    def _answer(value: list[dict[str, Any]] | Exception | None) -> list[dict[str, Any]]:
        if isinstance(value, Exception):
            raise value
        return copy.deepcopy(value or [])

    def search_channel_videos(self, channel_id: str, max_results: int) -> list[dict[str, Any]]:
        self.calls.append(("search_channel_videos", channel_id))
        return self._answer(self.channel_videos.get(channel_id))[:max_results]

    def get_video_status(self, video_ids: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("get_video_status", tuple(video_ids)))
        if self.status_error:
            raise self.status_error
        return [copy.deepcopy(self.statuses[v]) for v in video_ids if v in self.statuses]

    def get_channels_for_handle(self, handle: str) -> list[dict[str, Any]]:
        self.calls.append(("get_channels_for_handle", handle))
        return self._answer(self.handles.get(handle))

    def search_channels(self, query: str, max_results: int = 1) -> list[dict[str, Any]]:
        self.calls.append(("search_channels", query))
        return self._answer(self.channel_search.get(query))[:max_results]


class InMemoryVideoStore:
    """Video store with MongoDBManager's interface and atomic upsert-by-key.

    ``upsert_video`` yields to the event loop before writing so concurrent
    passes interleave, but the write itself is a single replace.
    """

    def __init__(self, fail_video_ids: set[str] | None = None) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.fail_video_ids = fail_video_ids or set()
        self.upsert_calls = 0
        self.initialized = False
        self.indexes_created = False
        self.closed = False

    async def initialize(self) -> None:
        self.initialized = True

    async def init_indexes(self) -> None:
        self.indexes_created = True

    async def close(self) -> None:
        self.closed = True

    async def ping(self) -> bool:
        return True

    async def upsert_video(self, document: dict[str, Any]) -> dict[str, Any]:
        self.upsert_calls += 1
        await asyncio.sleep(0)
        if document["video_id"] in self.fail_video_ids:
            raise OperationFailure(f"write failed for {document['video_id']}")
        self.documents[document["video_id"]] = dict(document)
        return dict(document)

    async def get_video(self, video_id: str) -> dict[str, Any] | None:
        doc = self.documents.get(video_id)
        return dict(doc) if doc else None

    async def list_videos(
        self, limit: int = 100, offset: int = 0, channel_id: str | None = None
    ) -> list[dict[str, Any]]:
        docs = [
            dict(d)
            for d in self.documents.values()
            if channel_id is None or d["channel_id"] == channel_id
        ]
        docs.sort(key=lambda d: d.get("published_at") or "", reverse=True)
        return docs[offset : offset + limit]

    async def delete_all_videos(self) -> int:
        count = len(self.documents)
        self.documents.clear()
        return count


def build_orchestrator(
    channels: list[Channel],
    client: FakeYouTubeClient,
    store: InMemoryVideoStore,
    max_results: int = 10,
) -> SyncOrchestrator:
    """Wire an orchestrator to test doubles."""
    return SyncOrchestrator(
        channels=channels,
        resolver=HandleResolver(client),  # type: ignore[arg-type]
        fetcher=VideoFetcher(client),  # type: ignore[arg-type]
        cache=VideoCache(store),
        max_results=max_results,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's .env file."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        youtube_api_key="test-youtube-key",
        mongodb_url="mongodb://localhost:27017",
        mongodb_database="test_church_media",
        scheduler_enabled=False,
    )


@pytest.fixture
def store() -> InMemoryVideoStore:
    """Empty in-memory video store."""
    return InMemoryVideoStore()


@pytest.fixture
def youtube() -> FakeYouTubeClient:
    """Two channels: UCaaa has two eligible videos, UCbbb one eligible and one private."""
    return FakeYouTubeClient(
        channel_videos={
            "UCaaa": [search_item("a1", published_at="2024-05-03T10:00:00Z"), search_item("a2")],
            "UCbbb": [search_item("b1"), search_item("b2")],
        },
        statuses={
            "a1": video_status("a1"),
            "a2": video_status("a2"),
            "b1": video_status("b1"),
            "b2": video_status("b2", privacy="private"),
        },
    )


@pytest.fixture
def app(settings: Settings, store: InMemoryVideoStore, youtube: FakeYouTubeClient) -> FastAPI:
    """FastAPI app wired to test doubles, scheduler off, admin key required."""
    orchestrator = build_orchestrator(
        [Channel(id="UCaaa", name="Ch A"), Channel(id="UCbbb", name="Ch B")], youtube, store
    )
    return create_app(
        settings=settings,
        db_manager=store,  # type: ignore[arg-type]
        orchestrator=orchestrator,
        enable_scheduler=False,
        admin_api_keys=[TEST_API_KEY],
    )


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client running the app lifespan."""
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def api_key_headers() -> dict[str, str]:
    """Headers with the configured admin key."""
    return {"X-API-Key": TEST_API_KEY}


@pytest.fixture
def api_error() -> YouTubeAPIError:
    """A quota error as raised by the API client."""
    return YouTubeAPIError("quotaExceeded", status_code=403)
