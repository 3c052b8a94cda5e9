"""Repository commands for the ORB CLI.

``orb repos list`` runs a server-side query through the HTTP API;
``orb repos show`` renders one repository and, on request, enriches it with
contributors and license text fetched lazily from GitHub.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import httpx
import typer
from rich.console import Console
from rich.panel import Panel

from apps.cli.orb_cli.utils import print_error, repository_detail, repository_table
from packages.clients.catalog_api_client import (
    CatalogApiClient,
    CatalogClientError,
    CatalogNotFoundError,
    CatalogValidationError,
)
from packages.clients.github_client import GithubClient, GithubClientError
from packages.common.logging import get_logger
from packages.schemas.models import FilterDimension

console = Console()
logger = get_logger(__name__)


async def list_command(
    term: str | None = None,
    filters: Mapping[FilterDimension, Sequence[str]] | None = None,
    sort: str | None = None,
    order: str | None = None,
    limit: int = 20,
    offset: int = 0,
    client: CatalogApiClient | None = None,
) -> None:
    """List approved repositories matching the given search and filters.

    Examples:
        orb repos list
        orb repos list --language Python --university "UC Berkeley"
        orb repos list -q climate --sort forks --order asc --limit 10
    """
    client = client or CatalogApiClient()
    try:
        async with client:
            repositories = await client.list_repositories(
                term=term, filters=filters, sort=sort, order=order, limit=limit, offset=offset
            )
    except CatalogValidationError as e:
        print_error(console, e.detail)
        raise typer.Exit(1) from None
    except (CatalogClientError, httpx.HTTPError) as e:
        print_error(console, f"ORB API request failed: {e}")
        logger.error("List repositories command failed", extra={"error": str(e)})
        raise typer.Exit(1) from None

    if not repositories:
        console.print("[yellow]No repositories found matching filters.[/yellow]")
        return

    console.print(repository_table(repositories, title=f"Repositories ({len(repositories)})"))
    if len(repositories) == limit:
        console.print(f"[dim]More results may exist; use --offset {offset + limit}[/dim]")


async def show_command(
    owner: str,
    name: str,
    contributors: bool = False,
    license_text: bool = False,
    client: CatalogApiClient | None = None,
    github: GithubClient | None = None,
) -> None:
    """Show one repository, optionally with GitHub contributors and license text.

    Examples:
        orb repos show uc-berkeley/example-repo
        orb repos show uc-berkeley/example-repo --contributors --license
    """
    client = client or CatalogApiClient()
    try:
        async with client:
            repo = await client.get_repository(owner, name)
    except CatalogNotFoundError:
        print_error(console, f"Repository {owner}/{name} not found")
        raise typer.Exit(1) from None
    except (CatalogClientError, httpx.HTTPError) as e:
        print_error(console, f"ORB API request failed: {e}")
        raise typer.Exit(1) from None

    console.print(repository_detail(repo))

    if not (contributors or license_text):
        return

    github = github or GithubClient()
    try:
        async with github:
            if contributors:
                people = await github.list_contributors(owner, name)
                listing = "\n".join(f"{p.login} ({p.contributions})" for p in people)
                console.print(Panel(listing or "No contributors found", title="Contributors"))
            if license_text:
                text = await github.get_license_text(owner, name)
                console.print(Panel(text or "No license file found", title="License"))
    except (GithubClientError, httpx.HTTPError) as e:
        console.print(f"[yellow]GitHub enrichment unavailable: {e}[/yellow]")


__all__ = ["list_command", "show_command"]
