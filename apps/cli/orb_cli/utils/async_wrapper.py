"""Run async ``orb`` commands from Typer's synchronous entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any, TypeVar

from packages.common.tracing import TracingContext

T = TypeVar("T")


def async_command(func: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., T]:
    """Run an async command in a fresh event loop under one correlation ID.

    Every API call the command makes carries the same ``X-Request-ID``, so the
    CLI's log lines and the server's request logs can be joined.

    Usage:
        @app.command()
        @async_command
        async def filters(dimension: str) -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        with TracingContext():
            return asyncio.run(func(*args, **kwargs))

    return wrapper


__all__ = ["async_command"]
