"""Configuration settings for the media sync backend."""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from media_sync.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and config.yaml."""

    model_config = SettingsConfigDict(  # type: ignore[assignment]
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars not defined in model
    )

    # YouTube Data API
    youtube_api_key: str = ""
    youtube_api_base_url: str = "https://www.googleapis.com/youtube/v3"
    youtube_api_timeout: int = 10  # seconds, per external call

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "church_media"
    mongodb_videos_collection: str = "videos"

    # Sync
    sync_interval_minutes: float = 15
    sync_max_results: int = 10
    sync_on_startup: bool = True
    sync_single_flight: bool = False
    scheduler_enabled: bool = True

    # Admin authentication
    admin_api_keys: str = ""  # ADMIN_API_KEYS, comma-separated

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @property
    def sync_interval_seconds(self) -> float:
        """Get sync interval in seconds."""
        return float(self.sync_interval_minutes * 60)

    @property
    def parsed_admin_api_keys(self) -> list[str]:
        """Parse admin API keys.

        Supports:
        - Comma-separated list: "key1,key2,key3"
        - Single key: "key1"
        - Empty: [] (admin endpoints open)

        Returns:
            List of admin API keys
        """
        return [k.strip() for k in self.admin_api_keys.split(",") if k.strip()]

    def require_youtube_api_key(self) -> str:
        """Return the YouTube API key or fail fast at process start.

        Raises:
            ConfigurationError: If no API key is configured
        """
        if not self.youtube_api_key.strip():
            raise ConfigurationError(
                "YOUTUBE_API_KEY is not set; channel sync cannot talk to the YouTube Data API"
            )
        if not self.mongodb_url.strip():
            raise ConfigurationError("MONGODB_URL is not set")
        return self.youtube_api_key


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_yaml_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to ./config.yaml or ./config.yml

    Returns:
        Dictionary with configuration values
    """
    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
            Path(__file__).parent.parent.parent / "config.yml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None or not Path(config_path).exists():
        return {}

    try:
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config file %s: %s", config_path, e)
        return {}


def apply_yaml_config(settings: Settings, config: dict[str, Any]) -> Settings:
    """
    Apply YAML configuration to settings object.

    Environment variables take precedence over YAML config.

    Args:
        settings: Settings object to update
        config: Configuration dictionary from YAML

    Returns:
        Updated Settings object
    """
    if "sync" in config:
        sync = config["sync"] or {}
        if "interval_minutes" in sync and "SYNC_INTERVAL_MINUTES" not in os.environ:
            settings.sync_interval_minutes = float(sync["interval_minutes"])
        if "max_results" in sync and "SYNC_MAX_RESULTS" not in os.environ:
            settings.sync_max_results = int(sync["max_results"])
        if "on_startup" in sync and "SYNC_ON_STARTUP" not in os.environ:
            settings.sync_on_startup = bool(sync["on_startup"])
        if "single_flight" in sync and "SYNC_SINGLE_FLIGHT" not in os.environ:
            settings.sync_single_flight = bool(sync["single_flight"])

    if "youtube_api" in config:
        yt = config["youtube_api"] or {}
        if "timeout" in yt and "YOUTUBE_API_TIMEOUT" not in os.environ:
            settings.youtube_api_timeout = int(yt["timeout"])

    return settings


def get_settings_with_yaml(config_path: Path | str | None = None) -> Settings:
    """
    Get settings with YAML configuration applied.

    Priority: Environment Variables > YAML Config > Defaults

    Args:
        config_path: Optional path to config file

    Returns:
        Settings object with YAML configuration applied
    """
    settings = get_settings()
    config = load_yaml_config(config_path)
    return apply_yaml_config(settings, config)
