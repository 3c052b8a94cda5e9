"""Core use cases - Application service orchestration.

Use cases orchestrate workflows across adapters without containing framework-specific code.
"""

from __future__ import annotations

from packages.core.use_cases.get_repository import GetRepositoryUseCase
from packages.core.use_cases.list_filter_values import ListFilterValuesUseCase
from packages.core.use_cases.list_repositories import ListRepositoriesUseCase

__all__ = [
    "GetRepositoryUseCase",
    "ListFilterValuesUseCase",
    "ListRepositoriesUseCase",
]
