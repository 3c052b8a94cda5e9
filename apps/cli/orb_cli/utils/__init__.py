"""Shared helpers for the ORB CLI."""

from apps.cli.orb_cli.utils.async_wrapper import async_command
from apps.cli.orb_cli.utils.render import (
    MISSING,
    parse_full_name,
    parse_selected_filters,
    print_error,
    repository_detail,
    repository_table,
)

__all__ = [
    "MISSING",
    "async_command",
    "parse_full_name",
    "parse_selected_filters",
    "print_error",
    "repository_detail",
    "repository_table",
]
