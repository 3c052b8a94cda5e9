"""Prometheus metrics endpoint for the ORB Showcase API.

Exposes HTTP request metrics and catalog query metrics (see
``packages.common.metrics``) in Prometheus text format.
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import REGISTRY, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Response: Prometheus metrics in text/plain format.

    Example:
        $ curl http://localhost:8000/metrics
        # HELP catalog_query_duration_seconds Catalog store query latency in seconds
        # TYPE catalog_query_duration_seconds histogram
        ...
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )


# Export public API
__all__ = ["router"]
