"""Module exposing the CLI Typer app under ``apps.cli``.

Entry points and tests reference ``apps.cli.main``; the implementation lives
in ``apps.cli.orb_cli``.
"""

from __future__ import annotations

from apps.cli.orb_cli.main import app

__all__ = ["app"]
