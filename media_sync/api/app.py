"""Main FastAPI application.

This module creates the FastAPI application with:
- Lifespan management of the database connection and sync scheduler
- Middleware for error handling and logging
- Video, admin and health routers
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from media_sync.api.middleware import setup_error_handler, setup_logging_middleware
from media_sync.api.routers import admin_router, health_router, videos_router
from media_sync.api.security import APIKeyValidator
from media_sync.channel.scheduler import SyncScheduler
from media_sync.channel.sync import SyncOrchestrator, create_orchestrator
from media_sync.core.config import Settings, get_settings_with_yaml
from media_sync.core.constants import API_PREFIX, APP_DESCRIPTION, APP_NAME, APP_VERSION
from media_sync.core.http_session import close_all_sessions
from media_sync.database.manager import MongoDBManager

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    db_manager: MongoDBManager | None = None,
    orchestrator: SyncOrchestrator | None = None,
    enable_scheduler: bool | None = None,
    admin_api_keys: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (default: environment + config.yaml)
        db_manager: Store to use (default: MongoDBManager from settings)
        orchestrator: Orchestrator to use (default: built at startup)
        enable_scheduler: Override ``settings.scheduler_enabled``
        admin_api_keys: Override the configured admin API keys

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings_with_yaml()
    scheduler_enabled = settings.scheduler_enabled if enable_scheduler is None else enable_scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Own the store connection and the scheduler for the app's lifetime."""
        logger.info("Starting %s v%s", APP_NAME, APP_VERSION)

        store: MongoDBManager = app.state.db_manager
        scheduler: SyncScheduler | None = None

        try:
            if app.state.orchestrator is None:
                # Missing API key is fatal here, never inside a pass
                settings.require_youtube_api_key()
                app.state.orchestrator = create_orchestrator(store, settings)

            await store.init_indexes()
            logger.info("Database indexes initialized")

            if scheduler_enabled:
                scheduler = SyncScheduler(
                    app.state.orchestrator.run_pass,
                    interval_seconds=settings.sync_interval_seconds,
                    run_on_start=settings.sync_on_startup,
                    single_flight=settings.sync_single_flight,
                )
                app.state.scheduler = scheduler
                await scheduler.start()
            else:
                logger.info("Sync scheduler disabled")

            yield

        except Exception as e:
            logger.exception("Startup failed: %s", e)
            raise

        finally:
            logger.info("Shutting down %s", APP_NAME)

            if scheduler is not None:
                await scheduler.stop()

            await store.close()
            close_all_sessions()
            logger.info("Database connection closed")

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db_manager = db_manager or MongoDBManager(settings)
    app.state.orchestrator = orchestrator
    app.state.scheduler = None
    app.state.api_key_validator = APIKeyValidator(
        admin_api_keys if admin_api_keys is not None else settings.parsed_admin_api_keys
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_logging_middleware(app)
    setup_error_handler(app)

    app.include_router(videos_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)
    app.include_router(health_router)

    logger.info("Application created successfully")
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "media_sync.api.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )
