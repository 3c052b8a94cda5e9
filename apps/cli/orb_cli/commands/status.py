"""CLI status command implementation.

Shows whether the ORB API answers its health check.
"""

import typer
from rich.console import Console
from rich.table import Table

from packages.common.config import get_config
from packages.common.health import check_api_health

console = Console()


async def status_command(api_url: str | None = None) -> None:
    """Display the health of the configured ORB API.

    Args:
        api_url: Override for ``ORB_API_URL``.
    """
    url = api_url or get_config().orb_api_url
    healthy = await check_api_health(url)

    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("URL")
    table.add_column("Status", style="bold")
    table.add_row("orb-api", url, "[green]✓[/green]" if healthy else "[red]✗[/red]")
    console.print(table)

    if not healthy:
        raise typer.Exit(1)


__all__ = ["status_command"]
