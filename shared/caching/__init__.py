"""
Cache-aside layer shared by the platform services.

- store: ``KeyValueStore`` capability with Redis and in-memory backends
- accessor: fail-open ``CacheAccessor`` (get/set/delete/clear by pattern)
- keys: resource key naming and ``CacheInvalidator``
"""

from .accessor import CacheAccessor, CacheLookup, LookupStatus, DEFAULT_TTL_SECONDS, escape_glob
from .keys import CacheInvalidator, ResourceKeys
from .store import InMemoryStore, KeyValueStore, RedisStore

__all__ = [
    "CacheAccessor",
    "CacheInvalidator",
    "CacheLookup",
    "DEFAULT_TTL_SECONDS",
    "InMemoryStore",
    "KeyValueStore",
    "LookupStatus",
    "RedisStore",
    "ResourceKeys",
    "escape_glob",
]
