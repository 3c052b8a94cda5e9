"""Prometheus metrics middleware for HTTP request instrumentation.

Automatically instruments all HTTP requests with Prometheus metrics:
- Request counts by method, route, and status
- Request duration histograms by method and route
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from packages.common.metrics import http_request_duration_seconds, http_requests_total


def _route_path(request: Request) -> str:
    """Route template (``/api/repositories/{owner}/{name}``) to keep label cardinality bounded."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to instrument HTTP requests with Prometheus metrics.

    Metrics are exposed via the /metrics endpoint.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(PrometheusMiddleware)
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore
        """Process request and record metrics.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            Response: HTTP response from downstream handler.
        """
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        path = _route_path(request)

        http_requests_total.labels(
            method=request.method, path=path, status=response.status_code
        ).inc()
        http_request_duration_seconds.labels(method=request.method, path=path).observe(duration)

        return response


# Export public API
__all__ = ["PrometheusMiddleware"]
