"""Fixtures shared by the API and CLI tests."""

from __future__ import annotations

import pytest
from fastapi import FastAPI

from apps.api.app import create_app
from apps.api.deps import get_repository_store
from packages.clients.memory_repository_store import InMemoryRepositoryStore


@pytest.fixture
def api_app(memory_store: InMemoryRepositoryStore) -> FastAPI:
    """Application with the store dependency bound to the seeded in-memory store.

    The lifespan is disabled so no PostgreSQL pool is created.
    """
    application = create_app(lifespan_enabled=False)
    application.dependency_overrides[get_repository_store] = lambda: memory_store
    return application
