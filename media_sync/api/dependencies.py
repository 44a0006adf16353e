"""FastAPI dependencies for the API module."""

from fastapi import Request

from media_sync.channel.scheduler import SyncScheduler
from media_sync.channel.sync import SyncOrchestrator
from media_sync.database.manager import MongoDBManager


async def get_db_manager_dep(request: Request) -> MongoDBManager:
    """Dependency to get the database manager owned by the app.

    Returns:
        MongoDBManager: Database manager instance
    """
    db_manager: MongoDBManager = request.app.state.db_manager
    await db_manager.initialize()
    return db_manager


def get_orchestrator(request: Request) -> SyncOrchestrator:
    """Dependency to get the sync orchestrator built at startup."""
    return request.app.state.orchestrator  # type: ignore[no-any-return]


def get_scheduler(request: Request) -> SyncScheduler | None:
    """Dependency to get the background scheduler, if enabled."""
    return getattr(request.app.state, "scheduler", None)
