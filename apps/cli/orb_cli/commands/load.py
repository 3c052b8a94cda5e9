"""Load command for the ORB CLI.

Seeds the catalog from a JSON export. Records are upserted by ``full_name``,
so re-loading the same file updates rows in place.

Accepted input: a JSON array of records, or an object with a
``repositories`` array. Each record may use either the public field names
(``description``, ``contacts``, ``funding``) or the storage column names
(``short_description``, ``contact_name_1``, ``funder_1``, ...).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console

from packages.clients.postgres_repository_store import PostgresRepositoryStore
from packages.common.config import get_config
from packages.common.logging import get_logger
from packages.common.postgres_pool import PostgresPool, PostgresPoolError
from packages.core.errors import StorageError
from packages.schemas.models import Repository

console = Console()
logger = get_logger(__name__)

_STORAGE_KEYS = ("short_description", "contact_name_1", "contact_email_1", "funder_1")


def parse_record(record: Mapping[str, Any]) -> Repository:
    """Build a repository from either the public or the storage representation.

    Raises:
        pydantic.ValidationError: If the record is malformed.
    """
    if any(key in record for key in _STORAGE_KEYS):
        return Repository.from_row(record)
    return Repository.model_validate(record)


def read_records(path: Path) -> list[Repository]:
    """Parse every record in a JSON export.

    Raises:
        ValueError: If the file is not valid JSON or has the wrong shape.
        pydantic.ValidationError: If a record is malformed.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, Mapping):
        data = data.get("repositories")
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of repositories (or {'repositories': [...]})")
    return [parse_record(item) for item in data]


def load_command(path: Path) -> int:
    """Upsert every repository in ``path`` into PostgreSQL.

    Returns:
        int: Number of repositories written.

    Example:
        $ orb load exports/repositories.json
    """
    try:
        repositories = read_records(path)
    except (OSError, KeyError, ValueError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Could not read {path}: {e}")
        raise typer.Exit(1) from None

    approved = sum(1 for repo in repositories if repo.approved)
    console.print(
        f"[yellow]Loading {len(repositories)} repositories ({approved} approved)...[/yellow]"
    )

    config = get_config()
    try:
        with (
            PostgresPool(config, application_name="orb-cli-load") as pool,
            pool.get_connection() as conn,
        ):
            written = PostgresRepositoryStore(conn).upsert(repositories)
    except (PostgresPoolError, StorageError) as e:
        console.print(f"[red]❌ Load failed: {e}[/red]")
        logger.exception("Load command failed", extra={"path": str(path)})
        raise typer.Exit(1) from None

    console.print(f"[green]✓ Upserted {written} repositories[/green]")
    return written


__all__ = ["load_command", "parse_record", "read_records"]
