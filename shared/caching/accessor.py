"""
Cache-aside accessor over a key-value store.

Request handlers read through ``get_cache`` / ``get_or_set`` and invalidate
with ``delete_cache`` / ``clear_cache`` after a mutation. The cache is never
authoritative: any store or serialization failure is logged and reported as
a miss (reads) or a no-op (writes), so a cache outage only costs latency.
"""

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from shared.errors import CacheSerializationError
from shared.logging import get_logger
from .store import KeyValueStore


DEFAULT_TTL_SECONDS = 3600

_GLOB_CHARS = "*?["


class LookupStatus(str, Enum):
    """Outcome of a single cache read."""
    HIT = "hit"
    MISS = "miss"
    ERROR = "error"


@dataclass(frozen=True)
class CacheLookup:
    """Result of ``CacheAccessor.lookup``.

    ``ERROR`` keeps the store failure visible to logging and metrics;
    ``get_cache`` folds it into a miss.
    """
    status: LookupStatus
    value: Any = None
    error: Optional[str] = None

    @property
    def hit(self) -> bool:
        return self.status is LookupStatus.HIT


def escape_glob(text: str) -> str:
    """Escape glob metacharacters so ``text`` matches itself literally.

    Uses one-character classes (``[*]``) which both Redis and fnmatch
    understand. Backslashes are rejected since the two disagree on them.
    """
    if "\\" in text:
        raise ValueError(f"cache key segment may not contain a backslash: {text!r}")
    return "".join(f"[{ch}]" if ch in _GLOB_CHARS else ch for ch in text)


class CacheAccessor:
    """Fail-open cache-aside accessor.

    Args:
        store: Any ``KeyValueStore`` implementation.
        default_ttl: TTL applied when ``set_cache`` is called without one.
        namespace: Optional prefix prepended (with ``:``) to every key and
            pattern, for sharing one Redis database between deployments.
        metrics: Optional collector exposing ``increment_counter`` and
            ``observe_histogram``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        namespace: Optional[str] = None,
        metrics: Optional[Any] = None,
    ):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.store = store
        self.default_ttl = default_ttl
        self.namespace = namespace
        # Raises for namespaces that cannot be matched literally by a glob.
        self._pattern_prefix = f"{escape_glob(namespace)}:" if namespace else ""
        self.metrics = metrics
        self.logger = get_logger("cache.accessor")

    def _key(self, key: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{key}"
        return key

    def _pattern(self, pattern: str) -> str:
        return f"{self._pattern_prefix}{pattern}"

    def _record(self, operation: str, result: str, started: float) -> None:
        if self.metrics is None:
            return
        self.metrics.increment_counter("cache_requests_total", operation=operation, result=result)
        self.metrics.observe_histogram(
            "cache_operation_duration_seconds", time.perf_counter() - started, operation=operation
        )

    async def lookup(self, key: str) -> CacheLookup:
        """Read ``key`` and report hit, miss or error without raising."""
        started = time.perf_counter()
        try:
            raw = await self.store.get(self._key(key))
            if raw is None:
                self._record("get", LookupStatus.MISS.value, started)
                return CacheLookup(LookupStatus.MISS)
            try:
                value = json.loads(raw)
            except ValueError as e:
                raise CacheSerializationError(key, str(e)) from e
        except CacheSerializationError as e:
            self.logger.warning("Cached payload could not be decoded", key=key, error=e.message)
            self._record("get", LookupStatus.ERROR.value, started)
            return CacheLookup(LookupStatus.ERROR, error=e.message)
        except Exception as e:
            self.logger.warning("Cache read failed", key=key, error=str(e))
            self._record("get", LookupStatus.ERROR.value, started)
            return CacheLookup(LookupStatus.ERROR, error=str(e))

        self._record("get", LookupStatus.HIT.value, started)
        return CacheLookup(LookupStatus.HIT, value=value)

    async def get_cache(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None on a miss or store failure."""
        result = await self.lookup(key)
        return result.value if result.hit else None

    async def set_cache(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Cache ``value`` as JSON for ``ttl_seconds`` (default TTL when None).

        Returns False when the value could not be stored; never raises for
        store or encoding failures.
        """
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl}")

        started = time.perf_counter()
        try:
            try:
                payload = json.dumps(value, separators=(",", ":"), allow_nan=False)
            except (TypeError, ValueError) as e:
                raise CacheSerializationError(key, str(e)) from e
            await self.store.set(self._key(key), payload, ttl)
        except CacheSerializationError as e:
            self.logger.warning(
                "Cache payload could not be encoded",
                key=key,
                value_type=type(value).__name__,
                error=e.message
            )
            self._record("set", "error", started)
            return False
        except Exception as e:
            self.logger.warning("Cache write failed", key=key, error=str(e))
            self._record("set", "error", started)
            return False

        self.logger.debug("Cached value", key=key, ttl=ttl)
        self._record("set", "ok", started)
        return True

    async def delete_cache(self, key: str) -> bool:
        """Remove exactly one key. Returns True if a key was removed."""
        started = time.perf_counter()
        try:
            removed = await self.store.delete(self._key(key))
        except Exception as e:
            self.logger.warning("Cache delete failed", key=key, error=str(e))
            self._record("delete", "error", started)
            return False

        self._record("delete", "ok", started)
        return removed > 0

    async def clear_cache(self, pattern: str) -> int:
        """Delete every key matching the glob ``pattern``.

        Returns the number of keys removed, 0 when the store failed.
        """
        started = time.perf_counter()
        try:
            removed = await self.store.delete_by_pattern(self._pattern(pattern))
        except Exception as e:
            self.logger.warning("Cache invalidation failed", pattern=pattern, error=str(e))
            self._record("clear", "error", started)
            return 0

        self._record("clear", "ok", started)
        if self.metrics is not None and removed:
            self.metrics.increment_counter("cache_invalidated_keys_total", amount=removed)
        self.logger.info("Cleared cache pattern", pattern=pattern, keys_count=removed)
        return removed

    async def clear_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix`` taken literally."""
        return await self.clear_cache(f"{escape_glob(prefix)}*")

    async def get_or_set(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl_seconds: Optional[int] = None,
    ) -> Any:
        """Cache-aside read: cached payload on hit, else ``await loader()``.

        The loaded value is cached before it is returned. Exceptions from
        ``loader`` propagate untouched.
        """
        cached = await self.lookup(key)
        if cached.hit:
            return cached.value

        value = await loader()
        await self.set_cache(key, value, ttl_seconds)
        return value
