"""Service health check utilities for the ORB Showcase service.

Provides async health checks for PostgreSQL (used by ``GET /health``) and for
a remote ORB API (used by ``orb status``) with timeout handling and error logging.
"""

import asyncio
from typing import TypedDict

import httpx

from packages.common.config import get_config
from packages.common.logging import get_logger
from packages.common.postgres_pool import PostgresPool

logger = get_logger(__name__)


class SystemHealthStatus(TypedDict):
    """System health status dictionary.

    Attributes:
        healthy: True if all services are healthy, False otherwise.
        services: Dictionary mapping service names to their health status.
    """

    healthy: bool
    services: dict[str, bool]


def _ping_postgres(pool: PostgresPool) -> None:
    with pool.get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()


async def check_postgres_health(pool: PostgresPool | None) -> bool:
    """Check PostgreSQL health by running ``SELECT 1`` on a pooled connection.

    The blocking psycopg2 call runs in the default executor and is bounded by
    ``health_check_timeout``.
    """
    if pool is None:
        logger.error("PostgreSQL health check failed", extra={"error": "pool not initialized"})
        return False

    config = get_config()
    try:
        loop = asyncio.get_running_loop()
        await asyncio.wait_for(
            loop.run_in_executor(None, _ping_postgres, pool),
            timeout=config.health_check_timeout,
        )
        logger.debug("PostgreSQL health check: OK")
        return True
    except Exception as e:
        logger.error("PostgreSQL health check failed", extra={"error": str(e)})
        return False


async def check_api_health(base_url: str | None = None) -> bool:
    """Check a running ORB API by requesting its ``/health`` endpoint."""
    config = get_config()
    url = (base_url or config.orb_api_url).rstrip("/") + "/health"
    try:
        async with httpx.AsyncClient(timeout=config.health_check_timeout) as client:
            response = await client.get(url)
            healthy = response.status_code == 200
            if not healthy:
                logger.error(
                    "ORB API health check failed",
                    extra={"url": url, "status_code": response.status_code},
                )
            return healthy
    except httpx.HTTPError as e:
        logger.error("ORB API health check failed", extra={"url": url, "error": str(e)})
        return False


async def check_system_health(pool: PostgresPool | None) -> SystemHealthStatus:
    """Aggregate health of the services the API depends on."""
    services = {"postgres": await check_postgres_health(pool)}
    healthy = all(services.values())

    if healthy:
        logger.info("System health check: All services operational")
    else:
        failed = [name for name, status in services.items() if not status]
        logger.warning(
            "System health check: Some services failed",
            extra={"failed_services": failed},
        )

    return {"healthy": healthy, "services": services}


# Export public API
__all__ = [
    "SystemHealthStatus",
    "check_api_health",
    "check_postgres_health",
    "check_system_health",
]
