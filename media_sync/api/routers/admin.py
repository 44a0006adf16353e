"""Admin endpoints.

POST /admin/sync-videos runs a sync pass immediately, through the scheduler
when one is running. It may overlap a scheduled pass; both merge through the
same atomic upsert.
"""

import logging

from fastapi import APIRouter, Depends

from media_sync.api.dependencies import get_orchestrator, get_scheduler
from media_sync.api.models.responses import SyncTriggerResponse
from media_sync.api.security import require_admin_key
from media_sync.channel.scheduler import SyncScheduler
from media_sync.channel.sync import SyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/sync-videos",
    response_model=SyncTriggerResponse,
    response_model_by_alias=True,
    summary="Sync videos now",
    description="Manually trigger a YouTube sync pass across all tracked channels.",
    operation_id="sync_videos",
)
async def sync_videos(
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
    scheduler: SyncScheduler | None = Depends(get_scheduler),
    api_key: str | None = Depends(require_admin_key),
) -> SyncTriggerResponse:
    """Run one sync pass and report the merged count with a per-channel breakdown."""
    logger.info("Manual YouTube sync triggered via API")
    if scheduler is not None:
        result = await scheduler.trigger_sync(orchestrator.sync_all)
    else:
        result = await orchestrator.sync_all()

    return SyncTriggerResponse(
        message=(
            f"YouTube sync completed successfully. Found {result.total_merged} new videos."
        ),
        new_videos=result.total_merged,
        channels=result.channels,
    )
