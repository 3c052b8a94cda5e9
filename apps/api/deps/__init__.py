"""Dependency injection helpers for the API layer."""

from __future__ import annotations

from .catalog import (
    get_get_repository_use_case,
    get_list_filter_values_use_case,
    get_list_repositories_use_case,
    get_postgres_pool,
    get_repository_store,
)

__all__ = [
    "get_get_repository_use_case",
    "get_list_filter_values_use_case",
    "get_list_repositories_use_case",
    "get_postgres_pool",
    "get_repository_store",
]
