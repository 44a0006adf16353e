"""Cache upserter - merges fetched videos into the durable store."""

import logging
from typing import Any, Protocol

from pymongo.errors import PyMongoError

from media_sync.core.exceptions import MergeError

from .schemas import VideoRecord

logger = logging.getLogger(__name__)


class VideoStore(Protocol):
    """Store that can atomically insert-or-replace a video by ``video_id``."""

    async def upsert_video(self, document: dict[str, Any]) -> dict[str, Any]: ...


class VideoCache:
    """Merge VideoRecords into the store, one atomic upsert per record."""

    def __init__(self, store: VideoStore) -> None:
        self.store = store

    async def merge(self, record: VideoRecord) -> dict[str, Any]:
        """
        Write-or-replace a video keyed by ``video_id``.

        Args:
            record: Video to merge

        Returns:
            The stored document

        Raises:
            MergeError: If the store rejects the write
        """
        try:
            stored = await self.store.upsert_video(record.to_document())
        except PyMongoError as e:
            raise MergeError(record.video_id, str(e)) from e

        if stored is None:
            raise MergeError(record.video_id, "store returned no document")
        return stored
