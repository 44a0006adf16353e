"""Structured logging configuration for the media sync backend."""

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

console = Console()

ROOT_LOGGER_NAME = "media_sync"


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    rich_tracebacks: bool = True,
) -> logging.Logger:
    """
    Configure structured logging for the application.

    Module loggers created with ``logging.getLogger(__name__)`` live under the
    ``media_sync`` tree and inherit these handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        rich_tracebacks: Enable rich traceback formatting

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=rich_tracebacks,
        tracebacks_show_locals=(level.upper() == "DEBUG"),
        markup=False,
    )
    rich_handler.setLevel(getattr(logging, level.upper()))
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    # Prevent logging to root logger
    logger.propagate = False

    logger.info("Logging initialized (level=%s)", level)

    return logger



def log_channel_sync_event(
    logger_instance: logging.Logger,
    channel_name: str,
    channel_label: str,
    event: str,
    channel_id: str | None = None,
    stage: str | None = None,
    videos_fetched: int | None = None,
    videos_merged: int | None = None,
    error: str | None = None,
) -> None:
    """
    Log channel sync events.

    Args:
        logger_instance: Logger to use
        channel_name: Display name of the channel
        channel_label: Handle or ID the channel is tracked by
        event: Event type (started, completed, skipped, failed)
        channel_id: Resolved channel ID, if known
        stage: Failing stage (resolve, fetch, merge)
        videos_fetched: Number of eligible videos fetched
        videos_merged: Number of videos merged into the cache
        error: Error message if failed
    """
    extra: dict[str, Any] = {
        "channel_name": channel_name,
        "channel_label": channel_label,
        "event": event,
    }

    if channel_id:
        extra["channel_id"] = channel_id
    if stage:
        extra["stage"] = stage
    if videos_fetched is not None:
        extra["videos_fetched"] = videos_fetched
    if videos_merged is not None:
        extra["videos_merged"] = videos_merged
    if error:
        extra["error"] = error

    if event == "failed":
        logger_instance.error(
            "Channel sync failed: %s (%s) at %s: %s",
            channel_name,
            channel_label,
            stage or "unknown",
            error,
            extra=extra,
        )
    elif event == "skipped":
        logger_instance.warning(
            "Channel skipped: %s (%s) at %s%s",
            channel_name,
            channel_label,
            stage or "unknown",
            f": {error}" if error else "",
            extra=extra,
        )
    elif event == "completed":
        logger_instance.info(
            "Channel sync complete: %s [%s] (%s fetched, %s merged)",
            channel_name,
            channel_id,
            videos_fetched,
            videos_merged,
            extra=extra,
        )
    else:
        logger_instance.info(
            "Channel sync %s: %s (%s)", event, channel_name, channel_label, extra=extra
        )
