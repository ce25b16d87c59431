"""
Unit tests for the Redis-backed key-value store.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from shared.caching import KeyValueStore, RedisStore
from shared.errors import CacheStoreError


def _scan_iter(keys):
    """Replacement for ``Redis.scan_iter`` yielding a fixed key list."""
    calls = []

    async def scan_iter(match=None, count=None):
        calls.append({"match": match, "count": count})
        for key in keys:
            yield key

    scan_iter.calls = calls
    return scan_iter


class TestRedisStore:
    """Test cases for RedisStore."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        client.setex = AsyncMock(return_value=True)
        client.delete = AsyncMock(return_value=1)
        client.ping = AsyncMock(return_value=True)
        client.aclose = AsyncMock()
        return client

    @pytest.fixture
    def store(self, client):
        return RedisStore(client, scan_count=2)

    def test_implements_store_capability(self, store):
        assert isinstance(store, KeyValueStore)

    def test_from_url_configures_client(self):
        with patch("shared.caching.store.redis.from_url") as mock_from_url:
            store = RedisStore.from_url("redis://cache:6379/1", socket_timeout=2.5, scan_count=100)

        mock_from_url.assert_called_once()
        args, kwargs = mock_from_url.call_args
        assert args == ("redis://cache:6379/1",)
        assert kwargs["decode_responses"] is True
        assert kwargs["socket_timeout"] == 2.5
        assert store.scan_count == 100
        assert store.redis is mock_from_url.return_value

    @pytest.mark.asyncio
    async def test_get_returns_value(self, store, client):
        client.get.return_value = '{"items":[]}'

        assert await store.get("store:1:12:all:approved") == '{"items":[]}'
        client.get.assert_awaited_once_with("store:1:12:all:approved")

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self, store, client):
        client.get.return_value = b'{"id":"a1"}'

        assert await store.get("store:item:a1") == '{"id":"a1"}'

    @pytest.mark.asyncio
    async def test_set_uses_setex(self, store, client):
        await store.set("store:item:a1", '{"id":"a1"}', 3600)

        client.setex.assert_awaited_once_with("store:item:a1", 3600, '{"id":"a1"}')

    @pytest.mark.asyncio
    async def test_delete_returns_count(self, store, client):
        client.delete.return_value = 0

        assert await store.delete("store:item:missing") == 0
        client.delete.assert_awaited_once_with("store:item:missing")

    @pytest.mark.asyncio
    async def test_delete_by_pattern_scans_and_deletes_in_batches(self, store, client):
        keys = ["store:1", "store:2", "store:3", "store:4", "store:5"]
        client.scan_iter = _scan_iter(keys)
        client.delete.side_effect = [2, 2, 1]

        deleted = await store.delete_by_pattern("store:*")

        assert deleted == 5
        assert client.scan_iter.calls == [{"match": "store:*", "count": 2}]
        assert [c.args for c in client.delete.await_args_list] == [
            ("store:1", "store:2"),
            ("store:3", "store:4"),
            ("store:5",),
        ]

    @pytest.mark.asyncio
    async def test_delete_by_pattern_without_matches(self, store, client):
        client.scan_iter = _scan_iter([])

        assert await store.delete_by_pattern("news:*") == 0
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connection_errors_become_store_errors(self, store, client):
        client.get.side_effect = RedisConnectionError("Connection refused")
        client.setex.side_effect = RedisTimeoutError("Timeout writing to socket")
        client.delete.side_effect = OSError("Network unreachable")

        with pytest.raises(CacheStoreError) as exc_info:
            await store.get("k")
        assert exc_info.value.operation == "GET"
        assert exc_info.value.details == {"key": "k"}

        with pytest.raises(CacheStoreError):
            await store.set("k", "v", 10)

        with pytest.raises(CacheStoreError):
            await store.delete("k")

    @pytest.mark.asyncio
    async def test_scan_failure_reports_partial_progress(self, store, client):
        client.scan_iter = _scan_iter(["a", "b", "c"])
        client.delete.side_effect = [2, RedisConnectionError("Connection reset")]

        with pytest.raises(CacheStoreError) as exc_info:
            await store.delete_by_pattern("*")

        assert exc_info.value.details == {"pattern": "*", "deleted": 2}

    @pytest.mark.asyncio
    async def test_ping_reports_health(self, store, client):
        assert await store.ping() is True

        client.ping.side_effect = RedisConnectionError("down")
        assert await store.ping() is False

    @pytest.mark.asyncio
    async def test_close_closes_client(self, store, client):
        await store.close()

        client.aclose.assert_awaited_once()
