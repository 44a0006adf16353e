"""Middleware for error handling and request logging."""

from media_sync.api.middleware.error_handler import setup_error_handler
from media_sync.api.middleware.logging import log_requests, setup_logging_middleware

__all__ = [
    "setup_error_handler",
    "log_requests",
    "setup_logging_middleware",
]
