"""Unit tests for planner_lite.core.http_client module."""

import httpx
import pytest

from planner_lite.core.http_client import DEFAULT_HEADERS, build_timeout, close_all_clients, get_shared_client

pytestmark = pytest.mark.unit


class TestSharedHTTPClient:
    """Test shared HTTP client management."""

    @pytest.mark.asyncio
    async def test_get_shared_client_reuses_existing_client(self):
        await close_all_clients()

        client1 = await get_shared_client("test_client")
        client2 = await get_shared_client("test_client")

        assert isinstance(client1, httpx.AsyncClient)
        assert client1 is client2
        assert client1.headers["User-Agent"] == DEFAULT_HEADERS["User-Agent"]

        await close_all_clients()

    @pytest.mark.asyncio
    async def test_different_ids_create_separate_clients(self):
        await close_all_clients()

        client1 = await get_shared_client("test_client_1")
        client2 = await get_shared_client("test_client_2")

        assert client1 is not client2

        await close_all_clients()

    @pytest.mark.asyncio
    async def test_close_all_clients_closes_and_recreates(self):
        await close_all_clients()
        client = await get_shared_client("test_client")

        await close_all_clients()

        assert client.is_closed
        replacement = await get_shared_client("test_client")
        assert replacement is not client
        assert not replacement.is_closed

        await close_all_clients()

    def test_build_timeout_sets_read_budget(self):
        timeout = build_timeout(12.5)
        assert timeout.read == 12.5
        assert timeout.connect == 10.0
