"""ORB CLI - Typer command-line interface for the UC ORB Showcase catalog."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console

from apps.cli.orb_cli.commands import repos_app
from apps.cli.orb_cli.utils import async_command, parse_full_name, parse_selected_filters
from packages.common.config import get_config
from packages.common.logging import setup_logging
from packages.common.tracing import TracingContext

app = typer.Typer(
    name="orb",
    help="ORB CLI - UC open-source repository catalog",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for JSON logs on stderr"),
) -> None:
    """Configure JSON logging before any command runs."""
    setup_logging(log_level, stream=sys.stderr, service="orb-cli")


@app.command()
def init(
    schema_path: str | None = typer.Option(
        None, "--schema", help="Alternative schema SQL file (defaults to the bundled schema)"
    ),
) -> None:
    """
    Initialize the PostgreSQL catalog schema.

    Creates the orb schema, the repositories table and its filter/sort
    indexes, and records the schema version. Safe to re-run.

    Example:
        orb init
    """
    from apps.cli.orb_cli.commands.init import init_command

    with TracingContext():
        init_command(schema_path=schema_path)


@app.command()
def load(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON export to load"),
) -> None:
    """
    Seed the catalog from a JSON export (upsert by full_name).

    Example:
        orb load exports/repositories.json
    """
    from apps.cli.orb_cli.commands.load import load_command

    with TracingContext():
        load_command(path)


@repos_app.command(name="list")
@async_command
async def repos_list(
    q: str | None = typer.Option(None, "--query", "-q", help="Search name and description"),
    university: list[str] = typer.Option([], "--university", "-u", help="Filter by university"),
    language: list[str] = typer.Option([], "--language", "-l", help="Filter by language"),
    license: list[str] = typer.Option([], "--license", help="Filter by license"),
    owner: list[str] = typer.Option([], "--owner", help="Filter by owner/organization"),
    topic: list[str] = typer.Option([], "--topic", "-t", help="Filter by topic area"),
    sort: str | None = typer.Option(None, "--sort", "-s", help="stars, forks, watchers, created_at, full_name"),
    order: str | None = typer.Option(None, "--order", help="asc or desc"),
    limit: int = typer.Option(20, "--limit", min=1, max=100, help="Maximum repositories to show"),
    offset: int = typer.Option(0, "--offset", "-o", min=0, help="Pagination offset"),
) -> None:
    """
    List repositories using the server-side query API.

    Repeat a filter option to select several values (OR); different
    options combine with AND.

    Examples:
        orb repos list
        orb repos list -l Python -l Go -u "UC Davis"
        orb repos list -q climate --sort forks --order asc
    """
    from apps.cli.orb_cli.commands.repos import list_command

    await list_command(
        term=q,
        filters=parse_selected_filters(university, language, license, owner, topic),
        sort=sort,
        order=order,
        limit=limit,
        offset=offset,
    )


@repos_app.command(name="show")
@async_command
async def repos_show(
    full_name: str = typer.Argument(..., help="Repository as owner/name"),
    contributors: bool = typer.Option(False, "--contributors", help="Fetch contributors from GitHub"),
    license_text: bool = typer.Option(False, "--license", help="Fetch license text from GitHub"),
) -> None:
    """
    Show one repository in detail.

    Examples:
        orb repos show uc-berkeley/example-repo
        orb repos show uc-berkeley/example-repo --contributors --license
    """
    from apps.cli.orb_cli.commands.repos import show_command

    owner, name = parse_full_name(full_name)
    await show_command(owner, name, contributors=contributors, license_text=license_text)


app.add_typer(repos_app, name="repos")


@app.command()
@async_command
async def filters(
    dimension: str = typer.Argument(
        ..., help="universities, languages, licenses, owners or topics"
    ),
) -> None:
    """
    List the values available for one filter dimension.

    Examples:
        orb filters universities
        orb filters topics
    """
    from apps.cli.orb_cli.commands.filters import filters_command

    await filters_command(dimension)


@app.command()
@async_command
async def browse(
    q: str = typer.Option("", "--query", "-q", help="Fuzzy search over name and description"),
    university: list[str] = typer.Option([], "--university", "-u", help="Filter by university"),
    language: list[str] = typer.Option([], "--language", "-l", help="Filter by language"),
    license: list[str] = typer.Option([], "--license", help="Filter by license"),
    owner: list[str] = typer.Option([], "--owner", help="Filter by owner/organization"),
    topic: list[str] = typer.Option([], "--topic", "-t", help="Filter by topic area"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page to show"),
    page_size: int | None = typer.Option(None, "--page-size", min=1, help="Repositories per page"),
) -> None:
    """
    Browse the catalog client-side: fetch a snapshot, then search, filter and page locally.

    Examples:
        orb browse
        orb browse -q genome -l Python --page 2
    """
    from apps.cli.orb_cli.commands.browse import browse_command

    await browse_command(
        term=q,
        filters=parse_selected_filters(university, language, license, owner, topic),
        page=page,
        page_size=page_size,
    )


@app.command()
@async_command
async def status(
    api_url: str | None = typer.Option(None, "--api-url", help="ORB API base URL"),
) -> None:
    """
    Check that the ORB API is up.

    Example:
        orb status
    """
    from apps.cli.orb_cli.commands.status import status_command

    await status_command(api_url=api_url)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (defaults to HOST)"),
    port: int | None = typer.Option(None, "--port", help="Port (defaults to ORB_HTTP_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """
    Run the ORB Showcase API with uvicorn.

    Example:
        orb serve --port 8000
    """
    import uvicorn

    config = get_config()
    uvicorn.run(
        "apps.api.app:app",
        host=host or config.host,
        port=port or config.orb_http_port,
        reload=reload,
        log_config=None,
    )


if __name__ == "__main__":
    app()
