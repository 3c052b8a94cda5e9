"""GetRepositoryUseCase - Single repository lookup by owner and name."""

from __future__ import annotations

import logging
import time

from packages.common.metrics import catalog_query_duration_seconds
from packages.core.errors import InvalidQueryError, RepositoryNotFoundError
from packages.core.ports.repositories import RepositoryStore
from packages.schemas.models import RepositoryOut

logger = logging.getLogger(__name__)


def build_full_name(owner: str, name: str) -> str:
    """Join owner and name into the ``owner/name`` identifier.

    Raises:
        InvalidQueryError: If either part is blank or contains a slash.
    """
    for field, value in (("owner", owner), ("name", name)):
        if not value or not value.strip():
            raise InvalidQueryError(field, "must not be empty")
        if "/" in value:
            raise InvalidQueryError(field, f"must not contain '/', got {value!r}")
    return f"{owner.strip()}/{name.strip()}"


class GetRepositoryUseCase:
    """Use case for fetching exactly one approved repository."""

    def __init__(self, repository_store: RepositoryStore) -> None:
        self.repository_store = repository_store

    def execute(self, owner: str, name: str) -> RepositoryOut:
        """Return the approved repository ``owner/name``.

        Raises:
            InvalidQueryError: If owner or name is malformed.
            RepositoryNotFoundError: If no approved record has that identifier.
            StorageError: If the store fails.
        """
        full_name = build_full_name(owner, name)

        start = time.perf_counter()
        repository = self.repository_store.find_by_full_name(full_name)
        catalog_query_duration_seconds.labels(operation="get").observe(time.perf_counter() - start)

        if repository is None or not repository.approved:
            logger.info("Repository not found", extra={"full_name": full_name})
            raise RepositoryNotFoundError(full_name)

        return RepositoryOut.from_repository(repository)


__all__ = ["GetRepositoryUseCase", "build_full_name"]
