"""CatalogStore - client-side snapshot of approved repositories plus view state.

The snapshot is an immutable tuple replaced wholesale on every refresh. The
search term, filter selection and current page live alongside it; every view
is recomputed from the snapshot and the current state on demand.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from packages.catalog.filter_engine import filter_records
from packages.catalog.paginator import Page, build_page, total_pages
from packages.catalog.search import MIN_RELEVANCE, SEARCH_RESULT_LIMIT
from packages.schemas.models import FilterDimension, Repository

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    """Anything that can fetch the full approved catalog."""

    async def fetch_all(self, page_size: int = 100) -> list[Repository]: ...


@dataclass(frozen=True)
class CatalogSnapshot:
    """An immutable, fully fetched set of repositories."""

    repositories: tuple[Repository, ...]
    generation: int
    fetched_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    loaded_monotonic: float = field(default_factory=time.monotonic)


class CatalogStore:
    """Holds the catalog snapshot and the user's search/filter/page state.

    Changing the term or the filter selection resets the page to 1. Fetches
    are last-write-wins: when refreshes overlap, only the most recently
    started one installs its result.
    """

    def __init__(
        self,
        source: SnapshotSource | None = None,
        *,
        page_size: int = 12,
        ttl_seconds: float | None = None,
        min_relevance: float = MIN_RELEVANCE,
        result_limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.source = source
        self.page_size = page_size
        self.ttl_seconds = ttl_seconds
        self.min_relevance = min_relevance
        self.result_limit = result_limit

        self._snapshot: CatalogSnapshot | None = None
        self._requested_generation = 0
        self._term = ""
        self._filters: dict[FilterDimension, frozenset[str]] = {}
        self._page = 1

    # ========== Snapshot ==========

    @property
    def snapshot(self) -> CatalogSnapshot | None:
        return self._snapshot

    @property
    def repositories(self) -> tuple[Repository, ...]:
        return self._snapshot.repositories if self._snapshot else ()

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def is_stale(self) -> bool:
        """True when nothing is loaded or the snapshot is older than the TTL."""
        if self._snapshot is None:
            return True
        if self.ttl_seconds is None:
            return False
        return time.monotonic() - self._snapshot.loaded_monotonic >= self.ttl_seconds

    def load(self, repositories: Iterable[Repository]) -> CatalogSnapshot:
        """Install a snapshot directly, superseding any in-flight refresh."""
        self._requested_generation += 1
        return self._install(repositories, self._requested_generation)

    def _install(self, repositories: Iterable[Repository], generation: int) -> CatalogSnapshot:
        approved = tuple(repo for repo in repositories if repo.approved)
        self._snapshot = CatalogSnapshot(repositories=approved, generation=generation)
        self._page = min(self._page, self.total_pages)
        logger.info(
            "Installed catalog snapshot",
            extra={"generation": generation, "count": len(approved)},
        )
        return self._snapshot

    async def refresh(self) -> CatalogSnapshot | None:
        """Fetch a new snapshot from the source.

        Returns:
            CatalogSnapshot | None: The installed snapshot, or the current one
            if a newer refresh started while this one was in flight.

        Raises:
            RuntimeError: If the store has no source.
        """
        if self.source is None:
            raise RuntimeError("CatalogStore has no snapshot source to refresh from")

        self._requested_generation += 1
        generation = self._requested_generation
        repositories = await self.source.fetch_all()

        if generation != self._requested_generation:
            logger.debug(
                "Discarding superseded snapshot",
                extra={"generation": generation, "latest": self._requested_generation},
            )
            return self._snapshot
        return self._install(repositories, generation)

    async def ensure_loaded(self) -> CatalogSnapshot | None:
        """Refresh only when no snapshot is loaded or the current one expired."""
        if self.is_stale:
            return await self.refresh()
        return self._snapshot

    # ========== Search/filter state ==========

    @property
    def term(self) -> str:
        return self._term

    @property
    def filters(self) -> dict[FilterDimension, frozenset[str]]:
        return dict(self._filters)

    @property
    def page(self) -> int:
        return self._page

    def set_term(self, term: str) -> None:
        self._term = term
        self._page = 1

    def set_filter(self, dimension: FilterDimension, values: Iterable[str]) -> None:
        """Replace the selection for one dimension; an empty selection clears it."""
        selected = frozenset(values)
        if selected:
            self._filters[dimension] = selected
        else:
            self._filters.pop(dimension, None)
        self._page = 1

    def toggle_filter(self, dimension: FilterDimension, value: str) -> None:
        """Add ``value`` to a dimension's selection, or remove it if already selected."""
        current = self._filters.get(dimension, frozenset())
        self.set_filter(dimension, current ^ {value})

    def clear_filters(self) -> None:
        self._filters.clear()
        self._page = 1

    def set_page(self, page: int) -> int:
        """Move to ``page``, clamped into the current view's range."""
        self._page = min(max(1, page), self.total_pages)
        return self._page

    # ========== Derived views ==========

    def filtered(self) -> list[Repository]:
        """Snapshot records matching the current term and filters."""
        return filter_records(
            self.repositories,
            self._term,
            self._filters,
            min_relevance=self.min_relevance,
            limit=self.result_limit,
        )

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered()), self.page_size)

    def current_page(self) -> Page[Repository]:
        """The current page of the filtered view."""
        return build_page(self.filtered(), self._page, self.page_size)

    def filter_options(self, dimension: FilterDimension) -> list[str]:
        """Distinct non-empty values for ``dimension`` across the snapshot."""
        return sorted(
            {value for repo in self.repositories if (value := repo.value_for(dimension))}
        )


__all__ = ["CatalogSnapshot", "CatalogStore", "SnapshotSource"]
