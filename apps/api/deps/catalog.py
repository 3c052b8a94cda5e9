"""Catalog dependency providers for the API layer."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from packages.clients.postgres_repository_store import PostgresRepositoryStore
from packages.common.config import get_config
from packages.common.postgres_pool import PostgresPool, PostgresPoolError
from packages.core.ports.repositories import RepositoryStore
from packages.core.use_cases import (
    GetRepositoryUseCase,
    ListFilterValuesUseCase,
    ListRepositoriesUseCase,
)

logger = logging.getLogger(__name__)


def get_postgres_pool(request: Request) -> PostgresPool:
    """Return the application-scoped pool created during startup."""
    pool: PostgresPool | None = getattr(request.app.state, "postgres_pool", None)
    if pool is None:
        logger.error("PostgreSQL pool requested before startup completed")
        raise HTTPException(status_code=503, detail="Database is not available")
    return pool


def get_repository_store(
    pool: Annotated[PostgresPool, Depends(get_postgres_pool)],
) -> Iterator[RepositoryStore]:
    """Provide a store bound to one pooled connection for the request.

    The connection goes back to the pool when the request ends, whether the
    handler succeeded or raised.
    """
    try:
        with pool.get_connection() as conn:
            yield PostgresRepositoryStore(conn)
    except PostgresPoolError as e:
        logger.exception("Failed to check out PostgreSQL connection", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail="Internal server error") from e


def get_list_repositories_use_case(
    store: Annotated[RepositoryStore, Depends(get_repository_store)],
) -> ListRepositoriesUseCase:
    config = get_config()
    return ListRepositoriesUseCase(
        store,
        strict_sort=config.strict_sort,
        default_limit=config.default_page_limit,
        max_limit=config.max_page_limit,
    )


def get_get_repository_use_case(
    store: Annotated[RepositoryStore, Depends(get_repository_store)],
) -> GetRepositoryUseCase:
    return GetRepositoryUseCase(store)


def get_list_filter_values_use_case(
    store: Annotated[RepositoryStore, Depends(get_repository_store)],
) -> ListFilterValuesUseCase:
    return ListFilterValuesUseCase(store)


__all__ = [
    "get_get_repository_use_case",
    "get_list_filter_values_use_case",
    "get_list_repositories_use_case",
    "get_postgres_pool",
    "get_repository_store",
]
