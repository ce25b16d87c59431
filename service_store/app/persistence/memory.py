"""
In-memory persistence layer for store items.
"""

from typing import Dict, List, Optional

from shared.logging import get_logger
from ..models import StoreItem, StoreItemCreate, StoreItemStatus


class InMemoryStoreItemRepository:
    """Authoritative record store for items.

    Returns copies so callers cannot mutate stored records without
    ``save``.
    """

    def __init__(self):
        self.logger = get_logger("store.persistence.memory")
        self._items: Dict[str, StoreItem] = {}

    async def list(self, *, status: StoreItemStatus, category: Optional[str] = None) -> List[StoreItem]:
        """Items with ``status`` (and ``category`` when given), newest first."""
        return [
            item.model_copy(deep=True)
            for item in reversed(list(self._items.values()))
            if item.status == status and (category is None or item.category == category)
        ]

    async def list_by_author(self, author_id: str) -> List[StoreItem]:
        return [
            item.model_copy(deep=True)
            for item in reversed(list(self._items.values()))
            if item.author_id == author_id
        ]

    async def get(self, item_id: str) -> Optional[StoreItem]:
        item = self._items.get(item_id)
        return item.model_copy(deep=True) if item else None

    async def create(self, data: StoreItemCreate, status: StoreItemStatus) -> StoreItem:
        item = StoreItem(**data.model_dump(), status=status)
        self._items[item.id] = item
        self.logger.info("Store item created", item_id=item.id, category=item.category)
        return item.model_copy(deep=True)

    async def save(self, item: StoreItem) -> StoreItem:
        self._items[item.id] = item.model_copy(deep=True)
        return item

    async def increment_views(self, item_id: str) -> None:
        item = self._items.get(item_id)
        if item is not None:
            item.views += 1

    async def delete(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None
