"""
Request logging middleware.

Binds ``request_id`` into the structlog context for the duration of the
request, so engine and snapshot events carry it without being passed it.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from batchtrace.config import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with an id and duration and echoes both as headers."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        clear_request_context()
        bind_request_context(request_id=request_id, method=request.method, path=request.url.path)

        start = time.perf_counter()
        logger.info("request_started")
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "request_completed", status=response.status_code, duration_ms=round(elapsed_ms, 2)
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        clear_request_context()
        return response
