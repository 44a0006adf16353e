"""MongoDB database manager.

This module handles all MongoDB connection management and operations
on the cached videos collection.
"""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from media_sync.core.config import Settings, get_settings


class MongoDBManager:
    """Manage MongoDB operations for the video cache.

    This class provides:
    - Connection lifecycle management
    - Collection access
    - Atomic upsert of videos keyed by ``video_id``
    - Read and maintenance operations for the API and CLI
    - Index management

    Usage:
        # Context manager (recommended)
        async with MongoDBManager() as db:
            await db.upsert_video(...)

        # Manual lifecycle management
        db = MongoDBManager()
        try:
            await db.upsert_video(...)
        finally:
            await db.close()
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize MongoDB manager."""
        self.settings = settings or get_settings()
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None
        self.videos: Any | None = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize MongoDB connection."""
        if self._initialized:
            return

        self.client = AsyncIOMotorClient(self.settings.mongodb_url)
        self.db = self.client[self.settings.mongodb_database]
        self.videos = self.db[self.settings.mongodb_videos_collection]
        self._initialized = True

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self.client and self._initialized:
            self.client.close()
            self._initialized = False

    async def __aenter__(self) -> "MongoDBManager":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def init_indexes(self) -> None:
        """Initialize database indexes.

        The unique ``video_id`` index is what makes concurrent upserts of the
        same video collapse to one document.
        """
        await self.initialize()

        await self.videos.create_index([("video_id", ASCENDING)], unique=True)
        await self.videos.create_index([("published_at", DESCENDING)])
        await self.videos.create_index([("channel_id", ASCENDING)])

    async def ping(self) -> bool:
        """Check that the server answers."""
        await self.initialize()
        await self.client.admin.command("ping")
        return True

    # Video operations

    async def upsert_video(self, document: dict[str, Any]) -> dict[str, Any]:
        """Insert or replace a video in one atomic operation.

        Args:
            document: Video document with a ``video_id`` key

        Returns:
            The stored document
        """
        await self.initialize()
        saved = await self.videos.find_one_and_replace(
            {"video_id": document["video_id"]},
            document,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        if saved and "_id" in saved:
            saved["_id"] = str(saved["_id"])
        return saved

    async def get_video(self, video_id: str) -> dict[str, Any] | None:
        """Retrieve a cached video.

        Args:
            video_id: Video identifier

        Returns:
            Video document as dict, or None if not found
        """
        await self.initialize()
        doc = await self.videos.find_one({"video_id": video_id})
        if doc and "_id" in doc:
            doc["_id"] = str(doc["_id"])
        return doc

    async def list_videos(
        self,
        limit: int = 100,
        offset: int = 0,
        channel_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """List cached videos, newest first.

        Args:
            limit: Maximum results to return
            offset: Number of results to skip
            channel_id: Optional channel ID filter

        Returns:
            List of video documents
        """
        await self.initialize()
        query: dict[str, Any] = {}
        if channel_id:
            query["channel_id"] = channel_id

        cursor = self.videos.find(query).sort("published_at", -1).skip(offset).limit(limit)

        results = []
        async for doc in cursor:
            if "_id" in doc:
                doc["_id"] = str(doc["_id"])
            results.append(doc)

        return results

    async def delete_all_videos(self) -> int:
        """Delete every cached video.

        Returns:
            Number of deleted documents
        """
        await self.initialize()
        result = await self.videos.delete_many({})
        return result.deleted_count
