"""Request logging middleware for the ORB Showcase API.

Provides structured JSON logging for all HTTP requests with:
- Request ID correlation (honours an incoming X-Request-ID header)
- Method and path
- Response status code
- Elapsed time in milliseconds
- Error details on failures
"""

import logging
import time
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from packages.common.tracing import REQUEST_ID_HEADER, TracingContext

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests with correlation IDs."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler in chain.

        Returns:
            Response: HTTP response from handler.
        """
        with TracingContext(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            start_ns = time.perf_counter_ns()

            logger.info(
                "Request started",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "client_host": request.client.host if request.client else None,
                },
            )

            # Store request_id in state for access in handlers
            request.state.request_id = request_id

            try:
                response = await call_next(request)
            except Exception:
                elapsed_ms = (time.perf_counter_ns() - start_ns) // 1_000_000
                logger.exception(
                    "Request failed",
                    extra={
                        "request_id": request_id,
                        "method": request.method,
                        "path": request.url.path,
                        "elapsed_ms": elapsed_ms,
                    },
                )
                # Re-raise to allow FastAPI error handlers to process
                raise

            elapsed_ms = (time.perf_counter_ns() - start_ns) // 1_000_000
            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "elapsed_ms": elapsed_ms,
                },
            )

            # Add request_id to response headers for client correlation
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
