"""Resilience utilities for external service calls with retry logic.

Provides decorators and retry controllers for wrapping calls to the ORB API
and GitHub with exponential backoff using tenacity. Only the exception types
passed in ``retry_on`` are retried; anything else propagates immediately.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _retry_policy(
    max_attempts: int,
    min_wait: float,
    max_wait: float,
    retry_on: tuple[type[Exception], ...],
) -> dict[str, Any]:
    return {
        "stop": stop_after_attempt(max_attempts),
        "wait": wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        "retry": retry_if_exception_type(retry_on),
        "before_sleep": before_sleep_log(logger, logging.WARNING),
        "reraise": True,
    }


def resilient_async_call(
    max_attempts: int = 3,
    min_wait: float = 1,
    max_wait: float = 10,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry decorator for asynchronous external service calls.

    Wraps async external calls with exponential backoff retry logic. Logs warnings
    before each retry attempt.

    Args:
        max_attempts: Maximum attempts including the first call (default: 3).
        min_wait: Minimum wait time in seconds (default: 1).
        max_wait: Maximum wait time in seconds (default: 10).
        retry_on: Exception types to retry on (default: all exceptions).

    Returns:
        Callable: Decorated async function with retry logic.

    Example:
        >>> @resilient_async_call(max_attempts=3, retry_on=(httpx.TransportError,))
        ... async def fetch_contributors(owner: str, name: str) -> list[dict]:
        ...     ...
    """
    return retry(**_retry_policy(max_attempts, min_wait, max_wait, retry_on))


def async_retrying(
    max_attempts: int = 3,
    min_wait: float = 1,
    max_wait: float = 10,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> AsyncRetrying:
    """Build a tenacity ``AsyncRetrying`` controller for runtime-configured retries.

    Used where the retry budget comes from configuration rather than being fixed
    at import time.

    Example:
        >>> async for attempt in async_retrying(max_attempts=config.client_max_attempts):
        ...     with attempt:
        ...         response = await client.get(path)
    """
    return AsyncRetrying(**_retry_policy(max_attempts, min_wait, max_wait, retry_on))


__all__ = ["async_retrying", "resilient_async_call"]
