"""ListFilterValuesUseCase - Option lists for the categorical filters."""

from __future__ import annotations

import logging
import time

from packages.common.metrics import catalog_query_duration_seconds
from packages.core.errors import InvalidQueryError
from packages.core.ports.repositories import RepositoryStore
from packages.schemas.models import FilterDimension

logger = logging.getLogger(__name__)


class ListFilterValuesUseCase:
    """Use case returning the distinct values present for one filter dimension."""

    def __init__(self, repository_store: RepositoryStore) -> None:
        self.repository_store = repository_store

    def execute(self, dimension: FilterDimension | str) -> list[str]:
        """Return sorted, de-duplicated values among approved repositories.

        Args:
            dimension: A :class:`FilterDimension` or its plural/singular name
                (``universities``, ``language``, ...).

        Raises:
            InvalidQueryError: If the dimension name is unknown.
            StorageError: If the store fails.
        """
        if not isinstance(dimension, FilterDimension):
            try:
                dimension = FilterDimension.from_plural(dimension)
            except ValueError as e:
                raise InvalidQueryError("dimension", str(e)) from None

        start = time.perf_counter()
        values = self.repository_store.distinct_values(dimension)
        catalog_query_duration_seconds.labels(operation=f"distinct_{dimension.value}").observe(
            time.perf_counter() - start
        )

        result = sorted({value for value in values if value})
        logger.debug("Resolved %d %s values", len(result), dimension.value)
        return result


__all__ = ["ListFilterValuesUseCase"]
