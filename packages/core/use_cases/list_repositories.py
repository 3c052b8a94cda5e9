"""ListRepositoriesUseCase - Filtered, sorted, paginated repository listing."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping

from packages.common.metrics import (
    catalog_query_duration_seconds,
    catalog_results_returned,
    catalog_sort_fallbacks_total,
)
from packages.core.errors import InvalidQueryError
from packages.core.ports.repositories import RepositoryStore
from packages.schemas.models import (
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    FilterDimension,
    RepositoryOut,
    RepositoryQuery,
    SortField,
    SortOrder,
)

logger = logging.getLogger(__name__)

MAX_TERM_LENGTH = 256


def resolve_sort_field(sort: str | None, *, strict: bool = False) -> SortField:
    """Map a raw sort parameter onto the allow-list.

    Blank values select the default field. Unknown values fall back to the
    default field, or raise when ``strict`` is set.

    Raises:
        InvalidQueryError: If ``strict`` and the field is not in the allow-list.
    """
    if sort is None or not sort.strip():
        return DEFAULT_SORT_FIELD

    try:
        return SortField(sort.strip().lower())
    except ValueError:
        if strict:
            valid = ", ".join(f.value for f in SortField)
            raise InvalidQueryError("sort", f"'{sort}' is not sortable. Valid values: {valid}") from None
        logger.warning(
            "Unrecognized sort field, using default",
            extra={"sort": sort, "default": DEFAULT_SORT_FIELD.value},
        )
        catalog_sort_fallbacks_total.inc()
        return DEFAULT_SORT_FIELD


def resolve_sort_order(order: str | None) -> SortOrder:
    """Map a raw order parameter onto ``asc``/``desc`` (default ``desc``).

    Raises:
        InvalidQueryError: If the order is neither ``asc`` nor ``desc``.
    """
    if order is None or not order.strip():
        return DEFAULT_SORT_ORDER
    normalized = order.strip().lower()
    aliases = {"ascending": SortOrder.ASC, "descending": SortOrder.DESC}
    if normalized in aliases:
        return aliases[normalized]
    try:
        return SortOrder(normalized)
    except ValueError:
        raise InvalidQueryError("order", f"'{order}' must be 'asc' or 'desc'") from None


def normalize_filters(
    filters: Mapping[FilterDimension, Iterable[str]] | None,
) -> dict[FilterDimension, tuple[str, ...]]:
    """Strip values, drop blanks and duplicates, keep first-seen order."""
    normalized: dict[FilterDimension, tuple[str, ...]] = {}
    for dimension, values in (filters or {}).items():
        seen: dict[str, None] = {}
        for value in values:
            cleaned = value.strip()
            if cleaned:
                seen.setdefault(cleaned, None)
        if seen:
            normalized[FilterDimension(dimension)] = tuple(seen)
    return normalized


class ListRepositoriesUseCase:
    """Use case for listing approved repositories.

    Supports:
    - Case-insensitive substring search over name and description
    - Multi-select filters per dimension (OR within, AND across)
    - Sorting by an allow-listed field with fallback to stars
    - Pagination via limit/offset
    """

    def __init__(
        self,
        repository_store: RepositoryStore,
        *,
        strict_sort: bool = False,
        default_limit: int = 100,
        max_limit: int = 100,
    ) -> None:
        self.repository_store = repository_store
        self.strict_sort = strict_sort
        self.default_limit = default_limit
        self.max_limit = max_limit

    def build_query(
        self,
        term: str | None = None,
        filters: Mapping[FilterDimension, Iterable[str]] | None = None,
        sort: str | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> RepositoryQuery:
        """Validate raw parameters into a :class:`RepositoryQuery`.

        Raises:
            InvalidQueryError: If any parameter is out of range or malformed.
        """
        if limit is None:
            limit = self.default_limit
        if not 1 <= limit <= self.max_limit:
            raise InvalidQueryError("limit", f"must be between 1 and {self.max_limit}, got {limit}")
        if offset < 0:
            raise InvalidQueryError("offset", f"must be >= 0, got {offset}")
        if term is not None and len(term) > MAX_TERM_LENGTH:
            raise InvalidQueryError("q", f"must be at most {MAX_TERM_LENGTH} characters")

        return RepositoryQuery(
            term=term,
            filters=normalize_filters(filters),
            sort=resolve_sort_field(sort, strict=self.strict_sort),
            order=resolve_sort_order(order),
            limit=limit,
            offset=offset,
        )

    def execute(
        self,
        term: str | None = None,
        filters: Mapping[FilterDimension, Iterable[str]] | None = None,
        sort: str | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[RepositoryOut]:
        """Run the listing and return records in the public response shape.

        Raises:
            InvalidQueryError: If any parameter is invalid (nothing is queried).
            StorageError: If the store fails.
        """
        query = self.build_query(term, filters, sort, order, limit, offset)

        logger.info(
            "Listing repositories",
            extra={
                "term": query.search_term,
                "filters": {d.value: list(v) for d, v in query.active_filters.items()},
                "sort": query.sort.value,
                "order": query.order.value,
                "limit": query.limit,
                "offset": query.offset,
            },
        )

        start = time.perf_counter()
        repositories = self.repository_store.search(query)
        catalog_query_duration_seconds.labels(operation="list").observe(time.perf_counter() - start)

        visible = [repo for repo in repositories if repo.approved]
        if len(visible) != len(repositories):
            logger.error(
                "Store returned unapproved repositories; dropping them",
                extra={"dropped": len(repositories) - len(visible)},
            )

        catalog_results_returned.observe(len(visible))
        logger.info("Found %d repositories", len(visible))
        return [RepositoryOut.from_repository(repo) for repo in visible]


__all__ = [
    "ListRepositoriesUseCase",
    "normalize_filters",
    "resolve_sort_field",
    "resolve_sort_order",
]
