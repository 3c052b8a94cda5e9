"""FastAPI application for the ORB Showcase API with CORS, lifecycle management, and middleware."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi import status as http_status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.api.middleware.logging import RequestLoggingMiddleware
from apps.api.middleware.metrics import PrometheusMiddleware
from apps.api.routes import filters, metrics, repositories
from packages.common.config import get_config
from packages.common.health import check_system_health
from packages.common.logging import setup_logging

logger = logging.getLogger(__name__)

# Single source of truth for version
try:
    VERSION = get_version("orb-showcase")
except PackageNotFoundError:
    VERSION = os.getenv("ORB_VERSION", "0.1.0")


def format_validation_errors(exc: RequestValidationError) -> str:
    """Join request validation errors into a single "loc: msg; loc: msg" string."""
    messages = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()) if part not in ("query", "path"))
        msg = error.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(messages) or "Invalid request"


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail = format_validation_errors(exc)
    logger.info("Rejected request parameters", extra={"path": request.url.path, "detail": detail})
    return JSONResponse(status_code=422, content={"detail": detail})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle: startup and shutdown.

    Startup:
        - Configure JSON logging
        - Open the read-only PostgreSQL connection pool
        - Log service readiness

    Shutdown:
        - Close all pooled connections
    """
    from packages.common.postgres_pool import PostgresPool

    config = get_config()
    setup_logging(config.log_level, service="orb-showcase-api")
    logger.info("Starting ORB Showcase API", extra={"version": VERSION})

    try:
        app.state.postgres_pool = PostgresPool(
            config, readonly=True, application_name="orb-showcase-api"
        )
    except Exception as e:
        logger.exception("Failed to initialize PostgreSQL pool", extra={"error": str(e)})
        raise

    logger.info("ORB Showcase API startup complete")

    yield

    logger.info("Shutting down ORB Showcase API")
    pool = getattr(app.state, "postgres_pool", None)
    if pool is not None:
        pool.close_all()
    logger.info("ORB Showcase API shutdown complete")


def create_app(*, lifespan_enabled: bool = True) -> FastAPI:
    """Build the FastAPI application.

    Args:
        lifespan_enabled: Create the PostgreSQL pool on startup. Tests that
            override the store dependency turn this off.
    """
    config = get_config()

    application = FastAPI(
        title="ORB Showcase API",
        version=VERSION,
        description="Read-only catalog of University of California open-source repositories",
        lifespan=lifespan if lifespan_enabled else None,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials="*" not in config.cors_allow_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(PrometheusMiddleware)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)

    application.include_router(repositories.router)
    application.include_router(filters.router)
    application.include_router(metrics.router)

    @application.get("/health")
    async def health(request: Request, response: Response) -> dict[str, Any]:
        """Health check endpoint.

        Returns:
            dict: Overall status and per-service status.
                - 200 if PostgreSQL is reachable
                - 503 otherwise
        """
        pool = getattr(request.app.state, "postgres_pool", None)
        health_status = await check_system_health(pool)

        is_healthy = health_status["healthy"]
        response.status_code = (
            http_status.HTTP_200_OK if is_healthy else http_status.HTTP_503_SERVICE_UNAVAILABLE
        )
        return dict(health_status)

    @application.get("/")
    async def root() -> dict[str, str]:
        """API info with version and docs link."""
        return {"message": f"ORB Showcase API v{VERSION}", "docs": "/docs"}

    return application


app = create_app()
