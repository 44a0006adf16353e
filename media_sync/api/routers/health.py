"""Health check endpoints for monitoring.

- GET /health - Liveness with database and scheduler status
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request

from media_sync.core.constants import APP_VERSION, START_TIME

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def check_database_health(request: Request) -> dict[str, Any]:
    """Check MongoDB health.

    Returns:
        Health status dictionary
    """
    result: dict[str, Any] = {"status": "unhealthy", "latency_ms": 0, "available": False}
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None:
        result["error"] = "No database manager"
        return result

    try:
        start = time.perf_counter()
        await db_manager.ping()
        result["status"] = "healthy"
        result["latency_ms"] = round((time.perf_counter() - start) * 1000, 2)
        result["available"] = True
    except Exception as e:
        # Health checks report failures instead of raising
        result["error"] = str(e)
        logger.warning("Database health check failed: %s", e)

    return result


def check_scheduler_health(request: Request) -> dict[str, Any]:
    """Report scheduler state."""
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return {"status": "disabled"}
    return {
        "status": "running" if scheduler.is_started else "stopped",
        "state": scheduler.state,
        "active_passes": scheduler.active_passes,
        "passes_started": scheduler.passes_started,
        "last_count": scheduler.last_count,
        "interval_seconds": scheduler.interval_seconds,
    }


@router.get("/health", summary="Health check")
async def health(request: Request) -> dict[str, Any]:
    """Health endpoint.

    The service is healthy as long as it runs; a degraded database is
    reported in ``components``.
    """
    database = await check_database_health(request)
    now = datetime.now(timezone.utc)
    return {
        "status": "healthy" if database["available"] else "degraded",
        "version": APP_VERSION,
        "timestamp": now.isoformat(),
        "uptime_seconds": round((now - START_TIME).total_seconds(), 1),
        "components": {
            "database": database,
            "scheduler": check_scheduler_health(request),
        },
    }
