"""Channel sync module - syncs church channel videos into the cache.

One pass walks the registry in order and, per channel, resolves the stable
ID, fetches eligible videos and merges them one by one. Failures stay inside
their unit: an unresolved or unfetchable channel is skipped, a failed merge
skips only that record. Passes share nothing but the store, so a manual
trigger may overlap a scheduled pass; the atomic upsert keeps that safe.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from media_sync.core.config import Settings, get_settings
from media_sync.core.constants import DEFAULT_MAX_RESULTS
from media_sync.core.exceptions import FetchError, MergeError
from media_sync.core.logging_config import log_channel_sync_event

from .cache import VideoCache, VideoStore
from .fetcher import VideoFetcher
from .registry import load_channel_registry
from .resolver import HandleResolver
from .schemas import Channel, ChannelOutcome, SyncResult
from .youtube_api import YouTubeDataClient

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Drive resolve -> fetch -> merge for every registered channel."""

    def __init__(
        self,
        channels: Sequence[Channel],
        resolver: HandleResolver,
        fetcher: VideoFetcher,
        cache: VideoCache,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self.channels = list(channels)
        self.resolver = resolver
        self.fetcher = fetcher
        self.cache = cache
        self.max_results = max_results

    async def run_pass(self) -> int:
        """
        Run one sync pass.

        Returns:
            Number of videos merged this pass (never raises)
        """
        result = await self.sync_all()
        return result.total_merged

    async def sync_all(self) -> SyncResult:
        """
        Run one sync pass and keep the per-channel breakdown.

        Returns:
            SyncResult with the merged total and one outcome per channel
        """
        logger.info("Starting YouTube sync (%d channels)", len(self.channels))
        result = SyncResult()

        for channel in self.channels:
            try:
                outcome = await self.sync_channel(channel)
            except Exception as e:
                # sync_channel absorbs expected failures; this guards the pass itself
                logger.exception("Unexpected error syncing %s", channel.name)
                outcome = ChannelOutcome(
                    channel_name=channel.name,
                    channel_label=channel.label,
                    status="error",
                    error=f"{type(e).__name__}: {e}",
                )
            result.channels.append(outcome)
            result.total_merged += outcome.videos_merged

        result.completed_at = datetime.now(timezone.utc)
        logger.info(
            "YouTube sync complete. Total new/updated videos: %d (%d/%d channels skipped)",
            result.total_merged,
            result.channels_failed,
            len(result.channels),
        )
        return result

    async def sync_channel(self, channel: Channel) -> ChannelOutcome:
        """
        Sync one channel.

        Args:
            channel: Channel from the registry

        Returns:
            ChannelOutcome for this channel
        """
        log_channel_sync_event(logger, channel.name, channel.label, "started")

        channel_id = await self.resolver.resolve(channel)
        if not channel_id:
            log_channel_sync_event(
                logger,
                channel.name,
                channel.label,
                "skipped",
                stage="resolve",
                error="could not resolve channel ID",
            )
            return ChannelOutcome(
                channel_name=channel.name,
                channel_label=channel.label,
                status="unresolved",
                error="could not resolve channel ID",
            )

        try:
            videos = await self.fetcher.fetch(channel_id, self.max_results)
        except FetchError as e:
            log_channel_sync_event(
                logger,
                channel.name,
                channel.label,
                "failed",
                channel_id=channel_id,
                stage="fetch",
                error=str(e),
            )
            return ChannelOutcome(
                channel_name=channel.name,
                channel_label=channel.label,
                channel_id=channel_id,
                status="fetch_failed",
                error=str(e),
            )

        merged = 0
        failed = 0
        for video in videos:
            try:
                await self.cache.merge(video)
            except MergeError as e:
                failed += 1
                logger.error("Failed to cache video %s for %s: %s", video.video_id, channel.name, e)
                continue
            except Exception as e:
                failed += 1
                logger.exception(
                    "Unexpected error caching video %s for %s: %s", video.video_id, channel.name, e
                )
                continue
            merged += 1
            logger.debug("Cached: %s", video.title)

        log_channel_sync_event(
            logger,
            channel.name,
            channel.label,
            "completed",
            channel_id=channel_id,
            videos_fetched=len(videos),
            videos_merged=merged,
        )
        return ChannelOutcome(
            channel_name=channel.name,
            channel_label=channel.label,
            channel_id=channel_id,
            status="synced",
            videos_fetched=len(videos),
            videos_merged=merged,
            videos_failed=failed,
        )


def create_orchestrator(
    store: VideoStore,
    settings: Settings | None = None,
    channels: Sequence[Channel] | None = None,
) -> SyncOrchestrator:
    """
    Build an orchestrator wired to the YouTube Data API and the given store.

    Args:
        store: Durable store with an atomic ``upsert_video``
        settings: Settings to use (default: cached application settings)
        channels: Registry override (default: config.yaml or built-in list)

    Returns:
        SyncOrchestrator ready to run passes
    """
    settings = settings or get_settings()
    client = YouTubeDataClient(
        api_key=settings.youtube_api_key,
        base_url=settings.youtube_api_base_url,
        timeout=settings.youtube_api_timeout,
    )
    return SyncOrchestrator(
        channels=channels if channels is not None else load_channel_registry(),
        resolver=HandleResolver(client),
        fetcher=VideoFetcher(client),
        cache=VideoCache(store),
        max_results=settings.sync_max_results,
    )
