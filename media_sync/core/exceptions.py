"""Custom exceptions for the channel sync engine."""


class MediaSyncError(Exception):
    """Base exception for media sync errors."""

    pass


class ConfigurationError(MediaSyncError):
    """Required configuration is missing or invalid."""

    pass


class YouTubeAPIError(MediaSyncError):
    """YouTube Data API request failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResolutionError(MediaSyncError):
    """Failed to map a channel handle to a stable channel ID."""

    pass


class FetchError(MediaSyncError):
    """Failed to fetch videos for a channel."""

    def __init__(self, channel_id: str, message: str) -> None:
        super().__init__(f"{channel_id}: {message}")
        self.channel_id = channel_id


class MergeError(MediaSyncError):
    """Failed to upsert a video record into the cache."""

    def __init__(self, video_id: str, message: str) -> None:
        super().__init__(f"{video_id}: {message}")
        self.video_id = video_id

