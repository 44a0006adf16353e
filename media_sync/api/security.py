"""Security module for admin API authentication.

Admin endpoints (the manual sync trigger) accept an ``X-API-Key`` header.
When no admin keys are configured, admin endpoints are open.
"""

import hashlib
import hmac
import logging

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from media_sync.core.config import get_settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def hash_api_key(api_key: str) -> str:
    """Hash an API key for storage and comparison.

    Args:
        api_key: Plain text API key

    Returns:
        SHA-256 hash of the key
    """
    return hashlib.sha256(api_key.encode()).hexdigest()


def mask_api_key(api_key: str) -> str:
    """Mask API key for logging/display."""
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}...{api_key[-4:]}"


class APIKeyValidator:
    """Validate admin API keys.

    Keys are kept hashed and compared in constant time.

    Usage:
        validator = APIKeyValidator(valid_keys=["key1", "key2"])

        @router.post("/admin/action")
        async def action(api_key = Depends(validator)):
            ...
    """

    def __init__(self, valid_keys: list[str] | None = None) -> None:
        """Initialize API key validator.

        Args:
            valid_keys: List of valid API keys. If None, uses settings.
        """
        if valid_keys is None:
            valid_keys = get_settings().parsed_admin_api_keys

        self._key_hashes = [hash_api_key(k) for k in valid_keys]

    @property
    def enabled(self) -> bool:
        """Whether any admin key is configured."""
        return bool(self._key_hashes)

    def validate(self, api_key: str | None) -> bool:
        """Validate an API key.

        Args:
            api_key: API key to validate

        Returns:
            True if valid, False otherwise
        """
        if not api_key:
            return False
        candidate = hash_api_key(api_key)
        return any(hmac.compare_digest(candidate, key_hash) for key_hash in self._key_hashes)

    async def __call__(
        self,
        request: Request,
        api_key: str | None = Security(API_KEY_HEADER),
    ) -> str | None:
        """Validate the API key on a request.

        Returns:
            Masked key if authenticated, None if auth is disabled

        Raises:
            HTTPException: If a key is required and missing or invalid
        """
        if not self.enabled:
            return None

        if not api_key:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="API key is required",
                headers={"WWW-Authenticate": "ApiKey"},
            )

        if not self.validate(api_key):
            logger.warning(
                "Rejected admin API key %s",
                mask_api_key(api_key),
                extra={"request_id": getattr(request.state, "request_id", None)},
            )
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key",
                headers={"WWW-Authenticate": "ApiKey"},
            )

        return mask_api_key(api_key)


async def require_admin_key(
    request: Request,
    api_key: str | None = Security(API_KEY_HEADER),
) -> str | None:
    """Dependency guarding admin endpoints.

    Reads the validator from ``app.state`` so tests and the app factory can
    configure keys explicitly.
    """
    validator: APIKeyValidator | None = getattr(request.app.state, "api_key_validator", None)
    if validator is None:
        validator = APIKeyValidator()
        request.app.state.api_key_validator = validator
    return await validator(request, api_key)
