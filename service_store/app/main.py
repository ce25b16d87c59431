"""
Store service for the Community Platform.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import Query

from shared.base_service import BaseService
from shared.caching import CacheInvalidator, KeyValueStore, ResourceKeys
from shared.errors import NotFoundError
from shared.pagination import paginate

from .models import Review, ReviewCreate, StoreItemCreate, StoreItemStatus
from .persistence import InMemoryStoreItemRepository


class StoreService(BaseService):
    """Store service implementation."""

    def __init__(
        self,
        cache_store: Optional[KeyValueStore] = None,
        repository: Optional[InMemoryStoreItemRepository] = None,
    ):
        super().__init__("store", 8020, cache_store=cache_store)

        self.repository = repository or InMemoryStoreItemRepository()
        self.cache_keys = ResourceKeys("store")
        self.invalidator = CacheInvalidator(self.cache, self.cache_keys)

        self._setup_store_routes()

    def _setup_store_routes(self):
        """Set up store-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "store",
                "message": "Community Platform - Store Service",
                "version": "1.0.0",
                "capabilities": ["items", "reviews", "caching"]
            }

        @self.app.get("/store")
        async def get_all_store_items(
            page: int = Query(1, ge=1, description="Page number"),
            limit: int = Query(12, ge=1, le=100, description="Items per page"),
            category: Optional[str] = Query(None, description="Filter by category"),
            status: StoreItemStatus = Query(StoreItemStatus.APPROVED, description="Filter by status")
        ):
            """List items, newest first."""
            # "" and "all" both mean no category filter and share one key.
            category = None if not category or category == "all" else category
            cache_key = self.cache_keys.list_key(page, limit, category, status.value)

            async def load():
                items = await self.repository.list(status=status, category=category)
                page_items, pagination = paginate(items, page, limit)
                return {
                    "items": [item.model_dump(mode="json") for item in page_items],
                    "pagination": pagination.model_dump()
                }

            data = await self.cache.get_or_set(cache_key, load)
            return {"success": True, "data": data}

        @self.app.get("/store/users/{author_id}/tools")
        async def get_user_tools(author_id: str):
            """Every item published by one author, uncached."""
            tools = await self.repository.list_by_author(author_id)
            return {
                "success": True,
                "data": {"tools": [tool.model_dump(mode="json") for tool in tools]}
            }

        @self.app.get("/store/{item_id}")
        async def get_store_item_details(item_id: str):
            """Item detail. The view counter is bumped without invalidating."""
            cache_key = self.cache_keys.item_key(item_id)

            cached = await self.cache.get_cache(cache_key)
            if cached is not None:
                return {"success": True, "data": cached}

            item = await self.repository.get(item_id)
            if item is None:
                raise NotFoundError("Store item not found", {"item_id": item_id})

            await self.repository.increment_views(item_id)
            await self.invalidator.item_viewed(item_id)

            data = item.model_dump(mode="json")
            await self.cache.set_cache(cache_key, data)
            return {"success": True, "data": data}

        @self.app.post("/store", status_code=201)
        async def add_store_item(request: StoreItemCreate):
            """Create an item. New items are approved immediately."""
            item = await self.repository.create(request, status=StoreItemStatus.APPROVED)
            await self.invalidator.item_created()
            return {"success": True, "data": item.model_dump(mode="json")}

        @self.app.post("/store/{item_id}/reviews")
        async def add_review(item_id: str, request: ReviewCreate):
            """Add a review, or replace the caller's earlier review."""
            item = await self.repository.get(item_id)
            if item is None:
                raise NotFoundError("Store item not found", {"item_id": item_id})

            now = datetime.now(timezone.utc)
            existing = next((r for r in item.reviews if r.user_name == request.user_name), None)
            if existing is not None:
                existing.rating = request.rating
                if request.comment:
                    existing.comment = request.comment
                existing.created_at = now
            else:
                item.reviews.append(Review(
                    user_name=request.user_name,
                    rating=request.rating,
                    comment=request.comment or "No comment provided",
                    created_at=now
                ))
            item.updated_at = now

            await self.repository.save(item)
            await self.invalidator.item_changed(item_id)

            self.logger.info(
                "Review saved",
                item_id=item_id,
                user_name=request.user_name,
                updated=existing is not None
            )
            return {"success": True, "data": item.model_dump(mode="json")}

        @self.app.delete("/store/{item_id}")
        async def delete_store_item(item_id: str):
            """Delete an item."""
            if not await self.repository.delete(item_id):
                raise NotFoundError("Store item not found", {"item_id": item_id})

            await self.invalidator.item_changed(item_id)
            return {"success": True, "message": "Store item deleted successfully"}


def create_app():
    """Create store service application."""
    service = StoreService()
    return service.app


if __name__ == "__main__":
    service = StoreService()
    service.run()
