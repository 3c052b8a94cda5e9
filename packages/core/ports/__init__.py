"""Ports for core use-cases."""

from __future__ import annotations

from packages.core.ports.repositories import RepositoryStore

__all__ = ["RepositoryStore"]
