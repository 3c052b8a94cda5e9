"""ORB CLI commands package.

This package contains the CLI command implementations:
- init: apply the PostgreSQL catalog schema
- load: seed the catalog from a JSON export
- repos: server-side listing and single-repository detail
- filters: distinct values per filter dimension
- browse: client-side search, filtering and pagination over a snapshot
- status: ORB API health

Shared sub-apps are created here to avoid duplication across command modules.
"""

from __future__ import annotations

import typer

# Shared sub-apps for command grouping
repos_app = typer.Typer(name="repos", help="List and inspect catalogued repositories")

__all__ = ["repos_app"]
