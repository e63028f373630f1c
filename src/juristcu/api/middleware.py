"""FastAPI middleware for request tracing and logging."""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

MAX_REQUEST_ID_LENGTH = 128

# Scraped every few seconds; not worth a log line each time
UNLOGGED_PATHS = frozenset({"/metrics"})


def resolve_request_id(request: Request) -> str:
    """Caller's X-Request-ID when it is usable, else a fresh UUID4."""
    incoming = (request.headers.get("x-request-id") or "").strip()
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH and incoming.isprintable():
        return incoming
    return str(uuid.uuid4())


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind a request_id to every log line emitted while serving a request.

    A scan can run for minutes and log hundreds of provider calls; the
    request_id ties them back to the POST that started them. The id is
    echoed in the X-Request-ID response header.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = resolve_request_id(request)
        path = request.url.path
        quiet = path in UNLOGGED_PATHS

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )
        if not quiet:
            logger.info(
                "Request started",
                client_host=request.client.host if request.client else None,
            )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed",
                exc_info=exc,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise
        else:
            if not quiet:
                logger.info(
                    "Request completed",
                    status_code=response.status_code,
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()
