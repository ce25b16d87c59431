"""
Cache key naming and invalidation for resource families.

Keys for one resource share a ``<resource>:`` root so a whole family can be
dropped with one pattern delete instead of tracking individual keys:

    store:1:12:all:approved     list page (page, limit, filters...)
    store:item:65d8c25a         single item
    news:all:2:10               list page under a list namespace
    news:65d8c25a               single item without an item segment
"""

from typing import Any, Optional

from shared.logging import get_logger
from .accessor import CacheAccessor, escape_glob


class ResourceKeys:
    """Builds list keys, item keys and invalidation patterns for a resource."""

    def __init__(self, resource: str, *, list_namespace: Optional[str] = None, item_segment: Optional[str] = "item"):
        if not resource or ":" in resource:
            raise ValueError(f"invalid resource name: {resource!r}")
        self.resource = resource
        self.list_namespace = list_namespace
        self.item_segment = item_segment

    def _list_root(self) -> str:
        if self.list_namespace:
            return f"{self.resource}:{self.list_namespace}"
        return self.resource

    def list_key(self, page: int, limit: int, *filters: Any) -> str:
        """``<resource>[:<namespace>]:<page>:<limit>[:<filter>...]``.

        ``None`` filters are written as ``all``.
        """
        parts = [self._list_root(), str(page), str(limit)]
        parts.extend("all" if f is None else str(f) for f in filters)
        return ":".join(parts)

    def item_key(self, item_id: Any) -> str:
        if self.item_segment:
            return f"{self.resource}:{self.item_segment}:{item_id}"
        return f"{self.resource}:{item_id}"

    def list_pattern(self) -> str:
        """Pattern covering every cached list page.

        Without a list namespace this is the whole resource family and
        also removes item keys.
        """
        return f"{escape_glob(self._list_root())}:*"

    def collection_pattern(self) -> str:
        """Pattern covering every key of the resource, lists and items."""
        return f"{escape_glob(self.resource)}:*"


class CacheInvalidator:
    """Applies the invalidation rules for one resource after mutations."""

    def __init__(self, cache: CacheAccessor, keys: ResourceKeys):
        self.cache = cache
        self.keys = keys
        self.logger = get_logger(f"cache.invalidator.{keys.resource}")

    async def item_created(self) -> int:
        """A new record can appear on any list page."""
        return await self.cache.clear_cache(self.keys.list_pattern())

    async def item_changed(self, item_id: Any) -> int:
        """Drop the item's detail entry and every list page that may embed it.

        Returns the number of keys removed.
        """
        removed = 1 if await self.cache.delete_cache(self.keys.item_key(item_id)) else 0
        removed += await self.cache.clear_cache(self.keys.list_pattern())
        self.logger.debug("Invalidated item", item_id=str(item_id), keys_count=removed)
        return removed

    async def item_viewed(self, item_id: Any) -> int:
        # View counters are allowed to go stale until the entry expires.
        return 0

    async def clear_all(self) -> int:
        return await self.cache.clear_cache(self.keys.collection_pattern())
