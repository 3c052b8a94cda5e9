"""In-memory implementation of the RepositoryStore port.

Mirrors ``PostgresRepositoryStore`` semantics for tests and local demos:

- Only approved records are visible
- Case-insensitive substring term match over full_name and description
- AND across dimensions, OR within a dimension
- Sort with NULLs last and full_name as tie-breaker, paging applied last
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from packages.core.ports.repositories import RepositoryStore
from packages.schemas.models import (
    FilterDimension,
    Repository,
    RepositoryQuery,
    SortField,
    SortOrder,
)


class InMemoryRepositoryStore(RepositoryStore):
    """Dictionary-backed store keyed by full_name, in insertion order."""

    def __init__(self, repositories: Iterable[Repository] = ()) -> None:
        self._repositories: dict[str, Repository] = {}
        self.upsert(list(repositories))

    def _approved(self) -> list[Repository]:
        return [repo for repo in self._repositories.values() if repo.approved]

    def _matches(self, repo: Repository, query: RepositoryQuery) -> bool:
        term = query.search_term
        if term:
            needle = term.casefold()
            haystacks = (repo.full_name, repo.description or "")
            if not any(needle in haystack.casefold() for haystack in haystacks):
                return False
        for dimension, values in query.active_filters.items():
            if repo.value_for(dimension) not in values:
                return False
        return True

    def search(self, query: RepositoryQuery) -> list[Repository]:
        matches = sorted(
            (repo for repo in self._approved() if self._matches(repo, query)),
            key=lambda repo: repo.full_name,
        )

        if query.sort is not SortField.FULL_NAME:
            field = query.sort.value
            present = [repo for repo in matches if getattr(repo, field) is not None]
            missing = [repo for repo in matches if getattr(repo, field) is None]
            present.sort(key=lambda repo: getattr(repo, field), reverse=query.order is SortOrder.DESC)
            matches = present + missing
        elif query.order is SortOrder.DESC:
            matches.reverse()

        return matches[query.offset : query.offset + query.limit]

    def find_by_full_name(self, full_name: str) -> Repository | None:
        repo = self._repositories.get(full_name)
        return repo if repo is not None and repo.approved else None

    def distinct_values(self, dimension: FilterDimension) -> list[str]:
        return sorted(
            {value for repo in self._approved() if (value := repo.value_for(dimension))}
        )

    def upsert(self, repositories: Sequence[Repository]) -> int:
        for repo in repositories:
            self._repositories[repo.full_name] = repo
        return len(repositories)


__all__ = ["InMemoryRepositoryStore"]
