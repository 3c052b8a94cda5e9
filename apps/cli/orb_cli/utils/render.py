"""Rich rendering and argument parsing shared by the ORB CLI commands."""

from __future__ import annotations

from collections.abc import Sequence

import typer
from rich.console import Console
from rich.table import Table

from packages.schemas.models import FilterDimension, Repository, format_timestamp

MISSING = "—"
UNKNOWN = "Unknown"


def print_error(console: Console, message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")


def _count(value: int | None) -> str:
    return MISSING if value is None else str(value)


def parse_full_name(full_name: str) -> tuple[str, str]:
    """Split ``owner/name``.

    Raises:
        typer.BadParameter: If the value is not exactly ``owner/name``.
    """
    owner, sep, name = full_name.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise typer.BadParameter(f"Expected 'owner/name', got {full_name!r}")
    return owner, name


def parse_selected_filters(
    university: Sequence[str] | None = None,
    language: Sequence[str] | None = None,
    license: Sequence[str] | None = None,
    owner: Sequence[str] | None = None,
    topic: Sequence[str] | None = None,
) -> dict[FilterDimension, list[str]]:
    """Collect repeatable ``--university/--language/...`` options into a filter mapping."""
    selected = {
        FilterDimension.UNIVERSITY: university,
        FilterDimension.LANGUAGE: language,
        FilterDimension.LICENSE: license,
        FilterDimension.OWNER: owner,
        FilterDimension.TOPIC: topic,
    }
    return {dimension: list(values) for dimension, values in selected.items() if values}


def repository_table(repositories: Sequence[Repository], title: str) -> Table:
    """Summary table: one row per repository."""
    table = Table(title=title)
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("University", style="green")
    table.add_column("Language", style="magenta")
    table.add_column("License")
    table.add_column("Stars", justify="right", style="yellow")
    table.add_column("Description", max_width=50)

    for repo in repositories:
        description = repo.description or MISSING
        table.add_row(
            repo.full_name,
            repo.university or UNKNOWN,
            repo.language or UNKNOWN,
            repo.license or MISSING,
            _count(repo.stars),
            description[:47] + "..." if len(description) > 50 else description,
        )
    return table


def repository_detail(repo: Repository) -> Table:
    """Two-column field/value table for one repository."""
    table = Table(title=repo.full_name, show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")

    rows = [
        ("Description", repo.description or MISSING),
        ("University", repo.university or UNKNOWN),
        ("Owner", repo.owner or MISSING),
        ("Language", repo.language or UNKNOWN),
        ("License", repo.license or MISSING),
        ("Topic", repo.topic_area or MISSING),
        ("Stars", _count(repo.stars)),
        ("Forks", _count(repo.forks)),
        ("Watchers", _count(repo.watchers)),
        ("Created", format_timestamp(repo.created_at) or MISSING),
        ("Homepage", repo.homepage or MISSING),
        ("GitHub", repo.html_url or MISSING),
        ("Default branch", repo.default_branch or MISSING),
    ]
    for contact in repo.contacts:
        label = " ".join(part for part in (contact.name, f"<{contact.email}>" if contact.email else None) if part)
        rows.append(("Contact", label or MISSING))
    for funding in repo.funding:
        grants = ", ".join(funding.grants)
        rows.append(("Funding", f"{funding.funder} ({grants})" if grants else funding.funder))

    for field, value in rows:
        table.add_row(field, value)
    return table


__all__ = [
    "MISSING",
    "UNKNOWN",
    "parse_full_name",
    "parse_selected_filters",
    "print_error",
    "repository_detail",
    "repository_table",
]
