"""Database module for MongoDB operations.

This module provides the durable video cache for the sync engine.

Usage:
    # Context manager (recommended)
    async with MongoDBManager() as db:
        await db.upsert_video(...)

    # Manual lifecycle
    db = MongoDBManager()
    try:
        await db.initialize()
        await db.upsert_video(...)
    finally:
        await db.close()
"""

from media_sync.database.manager import MongoDBManager

__all__ = ["MongoDBManager"]
