"""Registry of tracked church YouTube channels."""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from media_sync.core.config import load_yaml_config
from media_sync.core.exceptions import ConfigurationError

from .schemas import Channel

logger = logging.getLogger(__name__)

# Prefer explicit channel IDs (UC...) to avoid handle mixups
CHURCH_CHANNELS: tuple[Channel, ...] = (
    Channel(id="UC3DgiGIrnmfMbBjDQP0oM-w", handle="@CrownTvkeOfficial", name="Crown TV KE Official"),
    Channel(id="UC4uzQvfZ-TNtr9USnPNg72w", handle="@Machdan_media", name="Machdan Media"),
    Channel(
        id="UCqdgi-yU4fVlOhKZLrz24rw", handle="@repentpreparetheway", name="Repent Prepare The Way"
    ),
    Channel(
        id="UCuJUQh03Zub62Vv8uZd9SWA", handle="@kayolemainworshipchannel", name="Kayole Main Altar"
    ),
    Channel(id="UCoEYFha5gALQXSY0dBKCncw", handle="@thecitymegachurch", name="The City Megachurch"),
    Channel(id="UC1Ej2mG1R8L4R2c1I7Sqq4A", handle="@repentancechannel1", name="Repentance Channel 1"),
)


def parse_channels(entries: list[dict[str, Any]]) -> list[Channel]:
    """
    Build channels from raw config entries, keeping their order.

    Args:
        entries: List of mappings with ``id``, ``handle`` and ``name`` keys

    Returns:
        List of Channel objects

    Raises:
        ConfigurationError: If an entry is not a valid channel
    """
    channels = []
    for index, entry in enumerate(entries):
        try:
            channels.append(Channel.model_validate(entry))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid channel entry #{index}: {e}") from e
    return channels


def load_channel_registry(config_path: Path | str | None = None) -> list[Channel]:
    """
    Load the channel registry.

    A ``channels:`` list in config.yaml replaces the built-in registry.

    Args:
        config_path: Optional path to config file

    Returns:
        Channels in registry order
    """
    config = load_yaml_config(config_path)
    entries = config.get("channels")
    if entries:
        channels = parse_channels(entries)
        logger.info("Loaded %d channels from config", len(channels))
        return channels
    return list(CHURCH_CHANNELS)
