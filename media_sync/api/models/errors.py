"""Error bodies returned by the API.

Every error carries the request ID so app reports can be matched to logs.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ErrorCodes:
    """Machine-readable error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    NOT_FOUND = "NOT_FOUND"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# HTTP status -> (error type, error code)
ERROR_TYPES: dict[int, tuple[str, str]] = {
    400: ("BAD_REQUEST", ErrorCodes.INVALID_PARAMETER),
    401: ("UNAUTHORIZED", ErrorCodes.AUTHENTICATION_ERROR),
    403: ("FORBIDDEN", ErrorCodes.AUTHENTICATION_ERROR),
    404: ("NOT_FOUND", ErrorCodes.NOT_FOUND),
    422: ("VALIDATION_ERROR", ErrorCodes.VALIDATION_ERROR),
    500: ("INTERNAL_SERVER_ERROR", ErrorCodes.INTERNAL_ERROR),
}

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class ErrorResponse(BaseModel):
    """Standard error body."""

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., examples=["NOT_FOUND"])
    error_code: str = Field(..., examples=["NOT_FOUND"])
    message: str = Field(..., examples=["Video not found"])
    details: dict[str, Any] | None = None
    request_id: str = Field(..., description="Request ID, also sent as X-Request-ID")
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def for_status(
        cls,
        status_code: int,
        message: str,
        request_id: str,
        details: dict[str, Any] | None = None,
    ) -> "ErrorResponse":
        """Build the body for an HTTP status code."""
        error, error_code = ERROR_TYPES.get(status_code, ("HTTP_ERROR", f"HTTP_{status_code}"))
        return cls(
            error=error,
            error_code=error_code,
            message=message,
            details=details,
            request_id=request_id,
        )
