"""Request logging middleware.

Tags every request with an ``X-Request-ID`` and logs one line per response.
Health checks are logged at DEBUG so they don't drown out sync activity.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = frozenset({"/health"})


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Attach a request ID and log method, path, status and duration."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    path = request.url.path

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers[REQUEST_ID_HEADER] = request_id

    if path in QUIET_PATHS and response.status_code < 400:
        level = logging.DEBUG
    elif response.status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger.log(
        level,
        "%s %s %d %.1fms",
        request.method,
        path,
        response.status_code,
        duration_ms,
        extra={"request_id": request_id, "status_code": response.status_code},
    )
    return response


def setup_logging_middleware(app: FastAPI) -> None:
    """Install the request logging middleware."""
    app.middleware("http")(log_requests)
