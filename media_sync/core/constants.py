"""Application constants and metadata.

This module centralizes all application-wide constants for:
- Application metadata
- API configuration
- YouTube identifiers
"""

import re
from datetime import datetime, timezone

# Application start time (for uptime calculation)
START_TIME = datetime.now(timezone.utc)

# =============================================================================
# Application Metadata
# =============================================================================

APP_NAME = "Church Media Sync API"
APP_DESCRIPTION = """
Backend for the church media app.

## Features

- **Video Cache**: Recent, embeddable, public videos from the tracked church channels
- **Channel Sync**: Background sync every 15 minutes plus an admin "sync now" action
"""
APP_VERSION = "1.0.0"

# =============================================================================
# API Configuration
# =============================================================================

API_PREFIX = "/api"

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000
DEFAULT_OFFSET = 0

# =============================================================================
# YouTube
# =============================================================================

# Stable channel IDs carry the fixed "UC" prefix
CHANNEL_ID_PATTERN = re.compile(r"^UC[0-9A-Za-z_-]+$")
HANDLE_PREFIX = "@"

DEFAULT_MAX_RESULTS = 10
PUBLIC_PRIVACY_STATUS = "public"
