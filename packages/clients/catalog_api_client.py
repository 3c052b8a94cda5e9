"""Async HTTP client for the ORB Showcase API.

Wraps ``httpx.AsyncClient`` with:
- Exponential-backoff retries (tenacity) on transport errors, 429 and 5xx
- No retries on 400/404/422, which are surfaced as typed exceptions
- In-flight de-duplication: concurrent identical GETs share one request
- The current correlation ID, if any, is sent as X-Request-ID
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from packages.common.config import OrbConfig, get_config
from packages.common.resilience import async_retrying
from packages.common.tracing import REQUEST_ID_HEADER, get_correlation_id
from packages.schemas.models import FilterDimension, Repository

logger = logging.getLogger(__name__)

Params = tuple[tuple[str, str], ...]


class CatalogClientError(Exception):
    """Base exception for ORB API client errors."""

    def __init__(self, status_code: int | None, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}" if status_code else detail)


class CatalogValidationError(CatalogClientError):
    """Raised when the API rejects request parameters (400/422)."""

    pass


class CatalogNotFoundError(CatalogClientError):
    """Raised when the requested repository does not exist (404)."""

    pass


class CatalogServerError(CatalogClientError):
    """Raised on 429 and 5xx responses; retried before surfacing."""

    pass


def _detail_from(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return response.text


def raise_for_status(response: httpx.Response) -> None:
    """Translate an error response into the matching ``CatalogClientError``."""
    status = response.status_code
    if status < 400:
        return
    detail = _detail_from(response)
    if status == 404:
        raise CatalogNotFoundError(status, detail)
    if status in (400, 422):
        raise CatalogValidationError(status, detail)
    if status == 429 or status >= 500:
        raise CatalogServerError(status, detail)
    raise CatalogClientError(status, detail)


def to_repository(payload: Mapping[str, Any]) -> Repository:
    """Parse a public API record; served records are approved by construction."""
    return Repository.model_validate({**payload, "approved": True})


class CatalogApiClient:
    """Read-only client for the ORB Showcase HTTP API.

    Example:
        >>> async with CatalogApiClient() as client:
        ...     repos = await client.list_repositories(filters={FilterDimension.LANGUAGE: ["Python"]})
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        config: OrbConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_config()
        self.base_url = (base_url or self._config.orb_api_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._config.client_timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self._inflight: dict[tuple[str, Params], asyncio.Future[Any]] = {}

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> CatalogApiClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def _request(self, path: str, params: Params) -> Any:
        correlation_id = get_correlation_id()
        headers = {REQUEST_ID_HEADER: correlation_id} if correlation_id else None
        async for attempt in async_retrying(
            max_attempts=self._config.client_max_attempts,
            min_wait=self._config.client_min_wait,
            max_wait=self._config.client_max_wait,
            retry_on=(CatalogServerError, httpx.TransportError),
        ):
            with attempt:
                response = await self._client.get(path, params=list(params), headers=headers)
                raise_for_status(response)
                return response.json()

    async def get_json(self, path: str, params: Iterable[tuple[str, str]] = ()) -> Any:
        """GET ``path`` and return decoded JSON, sharing identical in-flight requests."""
        key = (path, tuple(params))
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._request(path, key[1]))
            self._inflight[key] = task
            task.add_done_callback(lambda _: self._inflight.pop(key, None))
        else:
            logger.debug("Joining in-flight request", extra={"path": path})
        return await asyncio.shield(task)

    async def list_repositories(
        self,
        term: str | None = None,
        filters: Mapping[FilterDimension, Iterable[str]] | None = None,
        sort: str | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Repository]:
        """Server-side listing (``GET /api/repositories``)."""
        params: list[tuple[str, str]] = []
        if term:
            params.append(("q", term))
        for dimension, values in (filters or {}).items():
            params.extend((FilterDimension(dimension).value, value) for value in values)
        if sort:
            params.append(("sort", sort))
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        if offset is not None:
            params.append(("offset", str(offset)))

        payload = await self.get_json("/api/repositories", params)
        return [to_repository(item) for item in payload]

    async def get_repository(self, owner: str, name: str) -> Repository:
        """Single record lookup (``GET /api/repositories/{owner}/{name}``).

        Raises:
            CatalogNotFoundError: If the repository is not in the catalog.
        """
        payload = await self.get_json(f"/api/repositories/{owner}/{name}")
        return to_repository(payload)

    async def filter_values(self, dimension: FilterDimension | str) -> list[str]:
        """Distinct values for one filter dimension (``GET /api/filters/{plural}``)."""
        if not isinstance(dimension, FilterDimension):
            dimension = FilterDimension.from_plural(dimension)
        payload = await self.get_json(f"/api/filters/{dimension.plural}")
        return [str(value) for value in payload]

    async def fetch_all(self, page_size: int = 100) -> list[Repository]:
        """Page through the full approved catalog to build a client snapshot."""
        repositories: list[Repository] = []
        offset = 0
        while True:
            page = await self.list_repositories(
                sort="full_name", order="asc", limit=page_size, offset=offset
            )
            repositories.extend(page)
            if len(page) < page_size:
                break
            offset += page_size
        logger.info("Fetched catalog snapshot", extra={"count": len(repositories)})
        return repositories


__all__ = [
    "CatalogApiClient",
    "CatalogClientError",
    "CatalogNotFoundError",
    "CatalogServerError",
    "CatalogValidationError",
    "raise_for_status",
    "to_repository",
]
