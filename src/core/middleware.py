"""
Request tracing middleware.

Binds a short request id into the structlog context so a repository warning
("Lookup fetch failed", ...) can be traced to the catalog request that
caused it. Probe endpoints are logged at debug to keep them out of the
request log.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import bind_context, clear_context, get_logger


logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROBE_PATHS = frozenset({"/health", "/live", "/ready"})


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Reuses the caller's X-Request-ID (or makes one), echoes it on the
    response, and logs status and duration per request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        path = request.url.path
        bind_context(request_id=request_id, method=request.method, path=path)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(started),
            )
            raise
        else:
            log = logger.debug if path in PROBE_PATHS else logger.info
            log(
                "Request completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
