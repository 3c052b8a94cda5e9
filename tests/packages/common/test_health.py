"""Tests for health check utilities."""

from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from packages.common.health import check_api_health, check_postgres_health, check_system_health


@pytest.fixture
def healthy_pool() -> MagicMock:
    pool = MagicMock()
    conn = pool.get_connection.return_value.__enter__.return_value
    conn.cursor.return_value.__enter__.return_value.fetchone.return_value = (1,)
    return pool


@pytest.mark.unit
class TestPostgresHealth:
    @pytest.mark.asyncio
    async def test_healthy(self, healthy_pool: MagicMock) -> None:
        assert await check_postgres_health(healthy_pool) is True
        healthy_pool.get_connection.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_pool(self) -> None:
        assert await check_postgres_health(None) is False

    @pytest.mark.asyncio
    async def test_query_failure(self) -> None:
        pool = MagicMock()
        pool.get_connection.side_effect = RuntimeError("pool exhausted")

        assert await check_postgres_health(pool) is False


@pytest.mark.unit
class TestSystemHealth:
    @pytest.mark.asyncio
    async def test_all_healthy(self, healthy_pool: MagicMock) -> None:
        status = await check_system_health(healthy_pool)

        assert status == {"healthy": True, "services": {"postgres": True}}

    @pytest.mark.asyncio
    async def test_unhealthy_without_pool(self) -> None:
        status = await check_system_health(None)

        assert status["healthy"] is False
        assert status["services"]["postgres"] is False


@pytest.mark.unit
class TestApiHealth:
    @pytest.mark.asyncio
    async def test_api_up(self, mocker: Any) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"healthy": True}))
        real_client = httpx.AsyncClient
        mocker.patch(
            "packages.common.health.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        )

        assert await check_api_health("http://orb.test") is True

    @pytest.mark.asyncio
    async def test_api_degraded(self, mocker: Any) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        real_client = httpx.AsyncClient
        mocker.patch(
            "packages.common.health.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        )

        assert await check_api_health("http://orb.test") is False

    @pytest.mark.asyncio
    async def test_api_unreachable(self, mocker: Any) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        transport = httpx.MockTransport(refuse)
        real_client = httpx.AsyncClient
        mocker.patch(
            "packages.common.health.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        )

        assert await check_api_health("http://orb.test") is False
