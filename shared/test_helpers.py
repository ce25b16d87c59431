"""
Test helpers and fakes for the Community Platform test suites.
"""

from typing import Any, Dict, List, Optional, Tuple

from shared.errors import CacheStoreError


class FakeClock:
    """Manually advanced clock for ``InMemoryStore``."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UnreachableStore:
    """Key-value store whose every call fails like a refused connection."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error or CacheStoreError("CONNECT", "Connection refused")
        self.calls: List[str] = []

    async def _fail(self, operation: str):
        self.calls.append(operation)
        raise self.error

    async def get(self, key: str) -> Optional[str]:
        return await self._fail("get")

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._fail("set")

    async def delete(self, key: str) -> int:
        return await self._fail("delete")

    async def delete_by_pattern(self, pattern: str) -> int:
        return await self._fail("delete_by_pattern")

    async def ping(self) -> bool:
        self.calls.append("ping")
        return False

    async def close(self) -> None:
        return None


class DummyMetrics:
    """Minimal metrics collector stub."""

    def __init__(self):
        self.counters: List[Tuple[str, float, Dict[str, Any]]] = []
        self.histograms: List[Tuple[str, float, Dict[str, Any]]] = []

    def increment_counter(self, metric_name: str, amount: float = 1, **labels):
        self.counters.append((metric_name, amount, labels))

    def observe_histogram(self, metric_name: str, value: float, **labels):
        self.histograms.append((metric_name, value, labels))

    def results(self, operation: str) -> List[str]:
        """Outcomes recorded for one cache operation, in call order."""
        return [
            labels["result"]
            for name, _amount, labels in self.counters
            if name == "cache_requests_total" and labels.get("operation") == operation
        ]


class SampleDataFactory:
    """Factory for request payloads."""

    @staticmethod
    def store_item(name: str = "Prompt Toolkit", category: str = "tools", author_id: str = "user-1", **overrides) -> Dict[str, Any]:
        payload = {
            "name": name,
            "description": "Reusable prompt templates",
            "category": category,
            "price": 0,
            "author_id": author_id,
            "author_name": "Ada",
            "tags": ["prompts", "templates"],
        }
        payload.update(overrides)
        return payload

    @staticmethod
    def news_article(title: str = "Community meetup", author_id: str = "user-1", **overrides) -> Dict[str, Any]:
        payload = {
            "title": title,
            "content": "We are meeting on Friday to demo projects.",
            "excerpt": "Meetup on Friday",
            "category": "events",
            "tags": ["meetup"],
            "author_id": author_id,
        }
        payload.update(overrides)
        return payload

    @staticmethod
    def store_listing_page() -> Dict[str, Any]:
        return {
            "items": [
                {"id": "a1", "name": "Prompt Toolkit", "category": "tools", "views": 3},
                {"id": "b2", "name": "Dataset Cleaner", "category": "data", "views": 0},
            ],
            "pagination": {"page": 1, "limit": 12, "total": 2, "pages": 1},
        }
