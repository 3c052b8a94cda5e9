"""Client-side filtering of a catalog snapshot.

Categorical filters are exact set membership: OR within a dimension, AND
across dimensions. A record with no value for a filtered dimension never
matches. The free-text term is then applied as a fuzzy ranked match.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from packages.catalog.search import MIN_RELEVANCE, SEARCH_RESULT_LIMIT, rank
from packages.schemas.models import FilterDimension, Repository

Filters = Mapping[FilterDimension, Iterable[str]]


def active_filters(filters: Filters | None) -> dict[FilterDimension, frozenset[str]]:
    """Drop dimensions with nothing selected."""
    active: dict[FilterDimension, frozenset[str]] = {}
    for dimension, values in (filters or {}).items():
        selected = frozenset(values)
        if selected:
            active[FilterDimension(dimension)] = selected
    return active


def matches_filters(repo: Repository, filters: Mapping[FilterDimension, frozenset[str]]) -> bool:
    """True if ``repo`` satisfies every active categorical filter."""
    return all(repo.value_for(dimension) in selected for dimension, selected in filters.items())


def filter_records(
    records: Sequence[Repository],
    term: str = "",
    filters: Filters | None = None,
    *,
    min_relevance: float = MIN_RELEVANCE,
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[Repository]:
    """Apply categorical filters, then the search term, to a snapshot.

    Args:
        records: Snapshot to filter. Never modified.
        term: Free-text term; blank keeps the input order.
        filters: Selected values per dimension.
        min_relevance: Relevance floor for term matches.
        limit: Maximum number of term matches returned.

    Returns:
        list[Repository]: Matching records.
    """
    selected = active_filters(filters)
    kept = [repo for repo in records if matches_filters(repo, selected)] if selected else list(records)

    if not term or not term.strip():
        return kept
    return rank(kept, term, min_relevance=min_relevance, limit=limit)


__all__ = ["Filters", "active_filters", "filter_records", "matches_filters"]
