"""Exception handlers that turn errors into ErrorResponse bodies."""

import logging
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from media_sync.api.models.errors import INTERNAL_ERROR_MESSAGE, ErrorResponse

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get(
        "X-Request-ID", str(uuid.uuid4())
    )


def _json(body: ErrorResponse, status_code: int, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions without leaking internals."""
    request_id = _request_id(request)
    logger.exception(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        extra={"request_id": request_id},
    )

    body = ErrorResponse.for_status(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        INTERNAL_ERROR_MESSAGE,
        request_id,
        details={"error_type": type(exc).__name__},
    )
    return _json(body, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle query/path validation errors."""
    request_id = _request_id(request)
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.info("Validation error on %s: %s", request.url.path, errors, extra={"request_id": request_id})

    body = ErrorResponse.for_status(
        422,
        "Request validation failed",
        request_id,
        details={"errors": errors},
    )
    return _json(body, 422)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTPException (404 for unknown videos, 401 for admin auth)."""
    request_id = _request_id(request)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    logger.info(
        "HTTP %d on %s: %s", exc.status_code, request.url.path, message, extra={"request_id": request_id}
    )

    body = ErrorResponse.for_status(exc.status_code, message, request_id)
    return _json(body, exc.status_code, headers=getattr(exc, "headers", None))


def setup_error_handler(app: FastAPI) -> None:
    """Register the exception handlers on the app."""
    app.add_exception_handler(Exception, handle_generic_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    logger.debug("Error handlers registered")
