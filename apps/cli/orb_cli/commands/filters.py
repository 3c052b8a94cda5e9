"""CLI filters command: list the options available for one filter dimension."""

import httpx
import typer
from rich.console import Console

from apps.cli.orb_cli.utils import print_error
from packages.clients.catalog_api_client import CatalogApiClient, CatalogClientError
from packages.schemas.models import FilterDimension

console = Console()


async def filters_command(dimension: str, client: CatalogApiClient | None = None) -> None:
    """Print the distinct values of ``dimension``, one per line.

    Examples:
        orb filters universities
        orb filters languages
    """
    try:
        resolved = FilterDimension.from_plural(dimension)
    except ValueError as e:
        print_error(console, str(e))
        raise typer.Exit(1) from None

    client = client or CatalogApiClient()
    try:
        async with client:
            values = await client.filter_values(resolved)
    except (CatalogClientError, httpx.HTTPError) as e:
        print_error(console, f"ORB API request failed: {e}")
        raise typer.Exit(1) from None

    if not values:
        console.print(f"[yellow]No {resolved.plural} in the catalog.[/yellow]")
        return

    console.print(f"[bold cyan]{resolved.plural.capitalize()}[/bold cyan] ({len(values)})")
    for value in values:
        console.print(f"  {value}", markup=False, highlight=False)


__all__ = ["filters_command"]
