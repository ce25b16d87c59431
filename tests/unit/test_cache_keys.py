"""
Unit tests for resource key naming and invalidation.
"""

import pytest
import pytest_asyncio

from shared.caching import CacheAccessor, CacheInvalidator, InMemoryStore, ResourceKeys, escape_glob


class TestResourceKeys:
    """Key layout for list pages and items."""

    def test_store_layout(self):
        keys = ResourceKeys("store")

        assert keys.list_key(1, 12, "all", "approved") == "store:1:12:all:approved"
        assert keys.list_key(2, 24, None, "pending") == "store:2:24:all:pending"
        assert keys.item_key("65d8c25a") == "store:item:65d8c25a"
        assert keys.list_pattern() == "store:*"
        assert keys.collection_pattern() == "store:*"

    def test_news_layout(self):
        keys = ResourceKeys("news", list_namespace="all", item_segment=None)

        assert keys.list_key(1, 10) == "news:all:1:10"
        assert keys.item_key("42") == "news:42"
        assert keys.list_pattern() == "news:all:*"
        assert keys.collection_pattern() == "news:*"

    @pytest.mark.parametrize("resource", ["", "store:item"])
    def test_rejects_invalid_resource_names(self, resource):
        with pytest.raises(ValueError):
            ResourceKeys(resource)

    def test_patterns_escape_glob_characters(self):
        keys = ResourceKeys("c*", list_namespace="a?b")

        assert keys.list_pattern() == "c[*]:a[?]b:*"
        assert keys.collection_pattern() == "c[*]:*"

    def test_escape_glob_rejects_backslash(self):
        with pytest.raises(ValueError):
            escape_glob("store\\item")


class TestCacheInvalidator:
    """Invalidation rules applied after mutations."""

    @pytest.fixture
    def cache(self):
        return CacheAccessor(InMemoryStore())

    @pytest_asyncio.fixture
    async def populated(self, cache):
        entries = {
            "store:1:12:all:approved": {"items": ["a1", "a2"]},
            "store:2:12:tools:approved": {"items": ["a3"]},
            "store:item:a1": {"id": "a1"},
            "store:item:a2": {"id": "a2"},
            "news:all:1:10": {"news": []},
            "news:n1": {"id": "n1"},
        }
        for key, value in entries.items():
            await cache.set_cache(key, value)
        return cache

    @pytest.mark.asyncio
    async def test_item_changed_drops_item_and_store_family(self, populated):
        invalidator = CacheInvalidator(populated, ResourceKeys("store"))

        await invalidator.item_changed("a1")

        assert await populated.get_cache("store:item:a1") is None
        assert await populated.get_cache("store:1:12:all:approved") is None
        assert await populated.get_cache("store:2:12:tools:approved") is None
        assert await populated.get_cache("news:all:1:10") == {"news": []}
        assert await populated.get_cache("news:n1") == {"id": "n1"}

    @pytest.mark.asyncio
    async def test_namespaced_lists_keep_other_items(self, populated):
        await populated.set_cache("news:n2", {"id": "n2"})
        invalidator = CacheInvalidator(populated, ResourceKeys("news", list_namespace="all", item_segment=None))

        removed = await invalidator.item_changed("n1")

        assert removed == 2
        assert await populated.get_cache("news:n1") is None
        assert await populated.get_cache("news:all:1:10") is None
        assert await populated.get_cache("news:n2") == {"id": "n2"}

    @pytest.mark.asyncio
    async def test_item_created_only_clears_lists(self, populated):
        invalidator = CacheInvalidator(populated, ResourceKeys("news", list_namespace="all", item_segment=None))

        assert await invalidator.item_created() == 1
        assert await populated.get_cache("news:n1") == {"id": "n1"}

    @pytest.mark.asyncio
    async def test_item_viewed_keeps_cached_detail(self, populated):
        invalidator = CacheInvalidator(populated, ResourceKeys("store"))

        assert await invalidator.item_viewed("a1") == 0
        assert await populated.get_cache("store:item:a1") == {"id": "a1"}

    @pytest.mark.asyncio
    async def test_clear_all_removes_collection(self, populated):
        invalidator = CacheInvalidator(populated, ResourceKeys("news", list_namespace="all", item_segment=None))

        assert await invalidator.clear_all() == 2
        assert await populated.get_cache("store:item:a1") == {"id": "a1"}
