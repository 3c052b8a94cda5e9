"""Repository port definitions for core use cases."""

from __future__ import annotations

from packages.core.ports.repositories.repository_store import RepositoryStore

__all__ = ["RepositoryStore"]
