"""Fixtures for CLI tests.

Command modules talk to an in-process API: ``CatalogApiClient`` is patched to
use ``httpx.ASGITransport`` over the seeded test app.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from rich.console import Console

from packages.clients.catalog_api_client import CatalogApiClient

COMMAND_MODULES = (
    "apps.cli.orb_cli.commands.repos",
    "apps.cli.orb_cli.commands.filters",
    "apps.cli.orb_cli.commands.browse",
    "apps.cli.orb_cli.commands.load",
    "apps.cli.orb_cli.commands.init",
    "apps.cli.orb_cli.commands.status",
)


@pytest.fixture(autouse=True)
def wide_console(mocker: Any) -> None:
    """Render Rich output wide enough that table cells never wrap."""
    for module in COMMAND_MODULES:
        mocker.patch(f"{module}.console", Console(width=200))


@pytest.fixture
def in_process_api(api_app: FastAPI, mocker: Any) -> None:
    """Route every CatalogApiClient built by a command to the in-process test app."""

    def build(*args: Any, **kwargs: Any) -> CatalogApiClient:
        kwargs["transport"] = httpx.ASGITransport(app=api_app)
        return CatalogApiClient(*args, **kwargs)

    for module in ("repos", "filters", "browse"):
        mocker.patch(f"apps.cli.orb_cli.commands.{module}.CatalogApiClient", side_effect=build)


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo the handler that the CLI callback installs on the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
