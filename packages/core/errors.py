"""Domain exceptions for the catalog query layer.

The API maps these onto HTTP status codes: ``InvalidQueryError`` -> 400,
``RepositoryNotFoundError`` -> 404, ``StorageError`` -> 500.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for catalog query failures."""

    pass


class InvalidQueryError(CatalogError, ValueError):
    """Raised when a query parameter has the wrong shape or is out of range."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}: {message}")


class RepositoryNotFoundError(CatalogError, LookupError):
    """Raised when no approved repository matches an owner/name lookup."""

    def __init__(self, full_name: str) -> None:
        self.full_name = full_name
        super().__init__(f"Repository not found: {full_name}")


class StorageError(CatalogError):
    """Raised when the backing store fails to answer a query."""

    pass


__all__ = ["CatalogError", "InvalidQueryError", "RepositoryNotFoundError", "StorageError"]
