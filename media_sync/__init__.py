"""Church media sync - caches church channel videos for the media app."""

from media_sync.channel import SyncOrchestrator, SyncScheduler, create_orchestrator

__version__ = "1.0.0"
__all__ = ["SyncOrchestrator", "SyncScheduler", "create_orchestrator"]
