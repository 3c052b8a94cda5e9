"""Init command for the ORB CLI.

Applies the catalog schema (``packages/common/sql/schema.sql``) to PostgreSQL
and verifies that every expected table exists afterwards. Safe to re-run: an
already-applied version with a matching checksum is skipped.
"""

import typer
from rich.console import Console

from packages.common.config import get_config
from packages.common.db_schema import create_schema, verify_schema
from packages.common.logging import get_logger

console = Console()
logger = get_logger(__name__)


def init_command(schema_path: str | None = None) -> None:
    """Create or update the PostgreSQL catalog schema.

    Exits with code 1 if the database is unreachable or the DDL fails.

    Example:
        $ orb init
    """
    config = get_config()
    try:
        console.print("[yellow]Creating PostgreSQL schema...[/yellow]")
        version = create_schema(config, schema_path)
        console.print(f"[green]✓ Schema at version {version}[/green]")

        missing = verify_schema(config)
        if missing:
            console.print(f"[red]❌ Missing tables: {', '.join(missing)}[/red]")
            raise typer.Exit(1)
        console.print("[green]✓ All catalog tables present[/green]")

    except typer.Exit:
        raise
    except (ConnectionError, RuntimeError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]❌ Initialization failed: {e}[/red]")
        logger.exception("Init command failed", extra={"database": config.postgres_db})
        raise typer.Exit(1) from None


__all__ = ["init_command"]
