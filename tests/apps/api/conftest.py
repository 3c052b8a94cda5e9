"""Fixtures for API tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture
def client(api_app: FastAPI) -> Iterator[TestClient]:
    """Create FastAPI TestClient for API tests.

    Uses the app from ``api_app``, so no database is needed.
    """
    with TestClient(api_app) as test_client:
        yield test_client
