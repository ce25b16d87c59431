"""
Key-value store backends for the cache accessor.

The accessor only needs four capabilities from a store: read a key, write a
key with an expiry, delete a key, and delete every key matching a glob
pattern. ``RedisStore`` provides them over redis.asyncio; ``InMemoryStore``
provides them over a dict and is what the test suites inject.
"""

import asyncio
import fnmatch
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, runtime_checkable

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.errors import CacheStoreError
from shared.logging import get_logger


@runtime_checkable
class KeyValueStore(Protocol):
    """Capability interface the cache accessor is built against."""

    async def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None when absent or expired."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key``, replacing any prior value and expiry."""
        ...

    async def delete(self, key: str) -> int:
        """Delete one key, returning 1 if it existed and 0 otherwise."""
        ...

    async def delete_by_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern and return the count."""
        ...

    async def ping(self) -> bool:
        ...

    async def close(self) -> None:
        ...


class RedisStore:
    """Redis-backed key-value store.

    Every redis or socket failure is re-raised as ``CacheStoreError`` so the
    accessor has a single exception family to degrade on.
    """

    def __init__(self, client: redis.Redis, scan_count: int = 500):
        self.redis = client
        self.scan_count = scan_count
        self.logger = get_logger("cache.store.redis")

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        *,
        connect_timeout: float = 5.0,
        socket_timeout: float = 5.0,
        scan_count: int = 500,
    ) -> "RedisStore":
        """Build a store from a connection URL. No connection is opened yet."""
        client = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=connect_timeout,
            socket_timeout=socket_timeout,
            retry_on_timeout=True,
            health_check_interval=30
        )
        return cls(client, scan_count=scan_count)

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.redis.get(key)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise CacheStoreError("GET", str(e), {"key": key}) from e

        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self.redis.setex(key, ttl_seconds, value)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise CacheStoreError("SETEX", str(e), {"key": key}) from e

    async def delete(self, key: str) -> int:
        try:
            return int(await self.redis.delete(key))
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise CacheStoreError("DEL", str(e), {"key": key}) from e

    async def delete_by_pattern(self, pattern: str) -> int:
        """SCAN for matching keys and delete them in batches.

        Keys written while the scan is running may or may not be removed.
        """
        deleted = 0
        batch: List[str] = []
        try:
            async for key in self.redis.scan_iter(match=pattern, count=self.scan_count):
                batch.append(key)
                if len(batch) >= self.scan_count:
                    deleted += int(await self.redis.delete(*batch))
                    batch = []
            if batch:
                deleted += int(await self.redis.delete(*batch))
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise CacheStoreError("SCAN/DEL", str(e), {"pattern": pattern, "deleted": deleted}) from e

        self.logger.debug("Deleted keys by pattern", pattern=pattern, count=deleted)
        return deleted

    async def ping(self) -> bool:
        """Check Redis health."""
        try:
            await self.redis.ping()
            return True
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            self.logger.warning("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.redis.aclose()
        self.logger.info("Redis store closed")


@dataclass
class _Entry:
    value: str
    expires_at: float


class InMemoryStore:
    """Process-local store with self-expiring entries.

    ``clock`` returns seconds as a float and defaults to ``time.monotonic``;
    tests pass a fake clock to move time forward without sleeping.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._entries: Dict[str, _Entry] = {}

    def _live(self, key: str) -> Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        entry = self._live(key)
        return entry.value if entry else None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl_seconds)

    async def delete(self, key: str) -> int:
        if self._live(key) is None:
            return 0
        del self._entries[key]
        return 1

    async def delete_by_pattern(self, pattern: str) -> int:
        matching = [
            key for key in list(self._entries)
            if fnmatch.fnmatchcase(key, pattern) and self._live(key) is not None
        ]
        for key in matching:
            del self._entries[key]
        return len(matching)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._entries.clear()

    def keys(self) -> List[str]:
        """Live keys, for inspection in tests and diagnostics."""
        return [key for key in list(self._entries) if self._live(key) is not None]
