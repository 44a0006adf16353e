"""Core package for the media sync backend."""

from media_sync.core.config import Settings, get_settings, get_settings_with_yaml
from media_sync.core.exceptions import (
    ConfigurationError,
    FetchError,
    MediaSyncError,
    MergeError,
    ResolutionError,
    YouTubeAPIError,
)
from media_sync.core.http_session import close_all_sessions, get_session
from media_sync.core.logging_config import log_channel_sync_event, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "get_settings_with_yaml",
    # Exceptions
    "MediaSyncError",
    "ConfigurationError",
    "YouTubeAPIError",
    "ResolutionError",
    "FetchError",
    "MergeError",
    # Logging
    "setup_logging",
    "log_channel_sync_event",
    # HTTP
    "get_session",
    "close_all_sessions",
]
