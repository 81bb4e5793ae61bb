"""
FastAPI middleware for request tracking.

Assigns every request a correlation id (taken from the incoming
X-Request-ID header when present), logs request start and completion,
and echoes the id back in the response headers.
"""

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from filecat.common.logging_config import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Adds X-Request-ID to responses and logs each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_id(request.headers.get("X-Request-ID"))

        logger.info(
            "Incoming request",
            extra={
                "extra_fields": {
                    "method": request.method,
                    "path": request.url.path,
                    "client": request.client.host if request.client else None,
                }
            },
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "extra_fields": {
                        "error": str(e),
                        "error_type": type(e).__name__,
                        "request_id": request_id,
                    }
                },
            )
            clear_request_id()
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "Request completed",
            extra={
                "extra_fields": {
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                }
            },
        )
        clear_request_id()

        return response
