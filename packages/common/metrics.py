"""Prometheus collectors for the ORB Showcase service.

HTTP metrics are recorded by ``PrometheusMiddleware``; catalog metrics are
recorded by the query use cases. All collectors live in the default registry
and are exposed by ``GET /metrics``.
"""

from prometheus_client import REGISTRY, Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=REGISTRY,
)

# Catalog query metrics
catalog_query_duration_seconds = Histogram(
    "catalog_query_duration_seconds",
    "Catalog store query latency in seconds",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
    registry=REGISTRY,
)

catalog_results_returned = Histogram(
    "catalog_results_returned",
    "Number of repositories returned per listing",
    buckets=[0, 1, 5, 10, 25, 50, 100],
    registry=REGISTRY,
)

catalog_sort_fallbacks_total = Counter(
    "catalog_sort_fallbacks_total",
    "Listings whose unrecognized sort field fell back to the default",
    registry=REGISTRY,
)


__all__ = [
    "catalog_query_duration_seconds",
    "catalog_results_returned",
    "catalog_sort_fallbacks_total",
    "http_request_duration_seconds",
    "http_requests_total",
]
