"""Repository store port definition."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from packages.schemas.models import FilterDimension, Repository, RepositoryQuery


class RepositoryStore(ABC):
    """Read-model abstraction over persisted repository records.

    Every method only ever sees records with ``approved = true``; callers never
    need to filter on approval themselves.
    """

    @abstractmethod
    def search(self, query: RepositoryQuery) -> list[Repository]:
        """Return approved records matching the query, sorted and sliced."""

    @abstractmethod
    def find_by_full_name(self, full_name: str) -> Repository | None:
        """Return the approved record with this identifier, if any."""

    @abstractmethod
    def distinct_values(self, dimension: FilterDimension) -> list[str]:
        """Return sorted, de-duplicated non-null values of a dimension among approved records."""

    @abstractmethod
    def upsert(self, repositories: Sequence[Repository]) -> int:
        """Insert or replace records keyed by ``full_name``; returns rows written."""


__all__ = ["RepositoryStore"]
