"""Channel sync module for the tracked church YouTube channels."""

from .cache import VideoCache
from .fetcher import VideoFetcher, is_eligible
from .registry import CHURCH_CHANNELS, load_channel_registry
from .resolver import HandleResolver, is_channel_id, normalize_handle
from .scheduler import SyncScheduler
from .schemas import Channel, ChannelOutcome, SyncResult, VideoRecord
from .sync import SyncOrchestrator, create_orchestrator
from .youtube_api import YouTubeDataClient

__all__ = [
    # Registry
    "CHURCH_CHANNELS",
    "load_channel_registry",
    # API client
    "YouTubeDataClient",
    # Resolver
    "HandleResolver",
    "is_channel_id",
    "normalize_handle",
    # Fetcher
    "VideoFetcher",
    "is_eligible",
    # Cache
    "VideoCache",
    # Schemas
    "Channel",
    "VideoRecord",
    "ChannelOutcome",
    "SyncResult",
    # Sync
    "SyncOrchestrator",
    "create_orchestrator",
    "SyncScheduler",
]
