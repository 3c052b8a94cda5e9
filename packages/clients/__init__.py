"""Client adapters for external systems.

Heavy dependencies (psycopg2, httpx) belong here, not in packages/common.
"""

from packages.clients.catalog_api_client import (
    CatalogApiClient,
    CatalogClientError,
    CatalogNotFoundError,
    CatalogServerError,
    CatalogValidationError,
)
from packages.clients.github_client import Contributor, GithubClient, GithubClientError
from packages.clients.memory_repository_store import InMemoryRepositoryStore
from packages.clients.postgres_repository_store import PostgresRepositoryStore

__all__ = [
    "CatalogApiClient",
    "CatalogClientError",
    "CatalogNotFoundError",
    "CatalogServerError",
    "CatalogValidationError",
    "Contributor",
    "GithubClient",
    "GithubClientError",
    "InMemoryRepositoryStore",
    "PostgresRepositoryStore",
]
