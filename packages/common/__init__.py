"""Common utilities for the ORB Showcase service.

This package provides reusable utilities like logging, config, tracing,
resilience helpers, health checks and the PostgreSQL connection pool.
"""

from packages.common.postgres_pool import PostgresPool, PostgresPoolError

__all__ = [
    "PostgresPool",
    "PostgresPoolError",
]
