"""Channel handle resolver - converts @handle to a stable channel ID."""

import asyncio
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from media_sync.core.constants import CHANNEL_ID_PATTERN, HANDLE_PREFIX
from media_sync.core.exceptions import ResolutionError, YouTubeAPIError

from .schemas import Channel
from .youtube_api import YouTubeDataClient

logger = logging.getLogger(__name__)


def is_channel_id(value: str | None) -> bool:
    """Check whether a value already has the stable channel ID shape."""
    return bool(value and CHANNEL_ID_PATTERN.match(value))


def normalize_handle(handle: str) -> str:
    """
    Normalize a channel handle to its canonical ``@name`` form.

    Args:
        handle: Channel handle (e.g., "@Machdan_media", "Machdan_media" or
            "https://www.youtube.com/@Machdan_media")

    Returns:
        Handle with a single leading "@"

    Raises:
        ValueError: If the handle is empty or a URL without a handle
    """
    handle = handle.strip()

    if handle.startswith("http"):
        match = re.search(r"@([a-zA-Z0-9_.-]+)", handle)
        if not match:
            raise ValueError(f"Could not extract handle from URL: {handle}")
        handle = match.group(1)

    handle = handle.lstrip(HANDLE_PREFIX)
    if not handle:
        raise ValueError("Empty channel handle")
    return HANDLE_PREFIX + handle


@dataclass(frozen=True)
class ResolutionStrategy:
    """A named lookup that maps a normalized handle to a channel ID or None."""

    name: str
    lookup: Callable[[str], str | None]


class HandleResolver:
    """Resolve channels to stable IDs by trying lookup strategies in order.

    Strategies:
    1. ``lookup_by_handle`` - channels endpoint with ``forHandle``
    2. ``search_by_text`` - generic channel search, first result

    A strategy that errors counts as a miss. Nothing is retried here.
    """

    def __init__(
        self,
        client: YouTubeDataClient | None = None,
        strategies: list[ResolutionStrategy] | None = None,
    ) -> None:
        self.client = client or YouTubeDataClient()
        self.strategies = strategies or [
            ResolutionStrategy("lookup_by_handle", self.lookup_by_handle),
            ResolutionStrategy("search_by_text", self.search_by_text),
        ]

    def lookup_by_handle(self, handle: str) -> str | None:
        """Primary strategy: exact handle lookup."""
        try:
            items = self.client.get_channels_for_handle(handle)
        except YouTubeAPIError as e:
            raise ResolutionError(f"handle lookup failed for {handle}: {e}") from e
        if not items:
            return None
        return items[0].get("id") or None

    def search_by_text(self, handle: str) -> str | None:
        """Fallback strategy: first channel from a text search on the handle."""
        try:
            items = self.client.search_channels(handle, max_results=1)
        except YouTubeAPIError as e:
            raise ResolutionError(f"channel search failed for {handle}: {e}") from e
        if not items:
            return None
        channel_ref = items[0].get("id")
        if isinstance(channel_ref, dict):
            return channel_ref.get("channelId") or None
        return None

    def resolve_handle(self, handle: str) -> str | None:
        """
        Resolve a handle by trying each strategy in order.

        Args:
            handle: Channel handle in any accepted form

        Returns:
            Channel ID, or None if no strategy found one
        """
        try:
            normalized = normalize_handle(handle)
        except ValueError as e:
            logger.warning("Cannot resolve %r: %s", handle, e)
            return None

        for strategy in self.strategies:
            try:
                channel_id = strategy.lookup(normalized)
            except ResolutionError as e:
                logger.warning("Strategy %s errored for %s: %s", strategy.name, normalized, e)
                continue

            if channel_id:
                logger.debug("Resolved %s to %s via %s", normalized, channel_id, strategy.name)
                return channel_id

            logger.debug("Strategy %s found nothing for %s", strategy.name, normalized)

        return None

    async def resolve(self, channel: Channel) -> str | None:
        """
        Resolve a channel to its stable ID.

        An ``id`` that already has the stable shape is returned without any
        network call.

        Args:
            channel: Channel from the registry

        Returns:
            Stable channel ID, or None when the channel should be skipped
        """
        if is_channel_id(channel.id):
            return channel.id

        handle = channel.handle or channel.id
        if not handle:
            return None

        return await asyncio.to_thread(self.resolve_handle, handle)
