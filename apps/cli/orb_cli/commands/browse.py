"""CLI browse command: client-side search over a fetched catalog snapshot.

Fetches every approved repository once, then applies the fuzzy search term
and the categorical filters locally and renders a single page together with
its page-number tokens.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import httpx
import typer
from rich.console import Console

from apps.cli.orb_cli.utils import print_error, repository_table
from packages.catalog import ELLIPSIS, CatalogStore, Page
from packages.clients.catalog_api_client import CatalogApiClient, CatalogClientError
from packages.common.config import get_config
from packages.schemas.models import FilterDimension, Repository

console = Console()


def render_tokens(page: Page[Repository]) -> str:
    """Render page tokens with the current page highlighted."""
    parts = []
    for token in page.tokens:
        if token == ELLIPSIS:
            parts.append("…")
        elif token == page.page:
            parts.append(f"[bold reverse] {token} [/bold reverse]")
        else:
            parts.append(str(token))
    return " ".join(parts)


async def browse_command(
    term: str = "",
    filters: Mapping[FilterDimension, Sequence[str]] | None = None,
    page: int = 1,
    page_size: int | None = None,
    client: CatalogApiClient | None = None,
) -> Page[Repository]:
    """Search and filter the catalog locally, then show one page.

    Examples:
        orb browse
        orb browse -q "genome" --language Python --page 2
    """
    config = get_config()
    client = client or CatalogApiClient(config=config)
    store = CatalogStore(
        client,
        page_size=page_size or config.client_page_size,
        min_relevance=config.search_min_relevance,
        result_limit=config.search_result_limit,
    )

    try:
        async with client:
            await store.refresh()
    except (CatalogClientError, httpx.HTTPError) as e:
        print_error(console, f"Could not fetch the catalog: {e}")
        raise typer.Exit(1) from None

    store.set_term(term)
    for dimension, values in (filters or {}).items():
        store.set_filter(dimension, values)
    store.set_page(page)

    current = store.current_page()
    if not current.total_items:
        console.print("[yellow]No repositories found matching filters.[/yellow]")
        return current

    console.print(
        repository_table(
            current.items,
            title=f"Repositories ({current.total_items} of {len(store.repositories)})",
        )
    )
    console.print(f"Page {current.page} of {current.total_pages}:  {render_tokens(current)}")
    return current


__all__ = ["browse_command", "render_tokens"]
