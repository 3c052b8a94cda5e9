"""GitHub REST API client for repository detail enrichment.

Fetches the two pieces of data the catalog does not store: the contributor
list and the full license text. Both are fetched lazily, one repository at a
time, when a detail view is rendered.
"""

import base64
import logging
from typing import Any

import httpx
from pydantic import BaseModel

from packages.common.config import OrbConfig, get_config
from packages.common.resilience import resilient_async_call

logger = logging.getLogger(__name__)


class GithubClientError(Exception):
    """Base exception for GithubClient errors."""

    pass


class Contributor(BaseModel):
    """A repository contributor as reported by GitHub."""

    login: str
    contributions: int = 0
    html_url: str | None = None
    avatar_url: str | None = None


class GithubClient:
    """Async GitHub REST client with retry on transient failures.

    A token is optional; without one, requests are subject to the anonymous
    rate limit.
    """

    def __init__(
        self,
        config: OrbConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Configuration (defaults to ``get_config()``).
            transport: Optional transport override (used by tests).
        """
        config = config or get_config()
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if config.github_token is not None:
            headers["Authorization"] = f"Bearer {config.github_token.get_secret_value()}"

        self._client = httpx.AsyncClient(
            base_url=config.github_api_url.rstrip("/"),
            headers=headers,
            timeout=config.client_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GithubClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @resilient_async_call(max_attempts=3, min_wait=0.5, max_wait=4, retry_on=(httpx.TransportError,))
    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        return await self._client.get(path, params=params)

    async def list_contributors(self, owner: str, name: str, limit: int = 10) -> list[Contributor]:
        """List the top contributors of a repository.

        Args:
            owner: Repository owner.
            name: Repository name.
            limit: Maximum number of contributors (GitHub caps pages at 100).

        Returns:
            list[Contributor]: Contributors ordered by contribution count.
            Empty if the repository is unknown to GitHub.

        Raises:
            GithubClientError: On any other non-success response.
        """
        response = await self._get(
            f"/repos/{owner}/{name}/contributors", {"per_page": max(1, min(limit, 100))}
        )
        if response.status_code == 404:
            logger.info(f"No contributors for {owner}/{name} (not found on GitHub)")
            return []
        if response.status_code == 204:
            return []
        self._raise_for_status(response, f"{owner}/{name} contributors")

        return [Contributor.model_validate(item) for item in response.json()[:limit]]

    async def get_license_text(self, owner: str, name: str) -> str | None:
        """Fetch the decoded license file of a repository.

        Returns:
            str | None: License text, or None if the repository has no license file.

        Raises:
            GithubClientError: On any non-success response other than 404.
        """
        response = await self._get(f"/repos/{owner}/{name}/license")
        if response.status_code == 404:
            return None
        self._raise_for_status(response, f"{owner}/{name} license")

        data = response.json()
        content = data.get("content")
        if not content:
            return None
        if data.get("encoding", "base64") == "base64":
            return base64.b64decode(content).decode("utf-8", errors="replace")
        return str(content)

    @staticmethod
    def _raise_for_status(response: httpx.Response, what: str) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"GitHub request for {what} failed: {response.status_code}")
            raise GithubClientError(
                f"GitHub request for {what} failed with status {response.status_code}"
            ) from e


__all__ = ["Contributor", "GithubClient", "GithubClientError"]
