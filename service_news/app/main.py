"""
News service for the Community Platform.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import Query
from pydantic import ValidationError as PydanticValidationError

from shared.base_service import BaseService
from shared.caching import CacheInvalidator, KeyValueStore, ResourceKeys
from shared.errors import NotFoundError, ValidationError
from shared.pagination import paginate

from .models import Comment, CommentCreate, LikeRequest, NewsArticle, NewsCreate, NewsUpdate
from .persistence import InMemoryNewsRepository


class NewsService(BaseService):
    """News service implementation."""

    def __init__(
        self,
        cache_store: Optional[KeyValueStore] = None,
        repository: Optional[InMemoryNewsRepository] = None,
    ):
        super().__init__("news", 8021, cache_store=cache_store)

        self.repository = repository or InMemoryNewsRepository()
        # news:all:<page>:<limit> for lists, news:<id> for articles
        self.cache_keys = ResourceKeys("news", list_namespace="all", item_segment=None)
        self.invalidator = CacheInvalidator(self.cache, self.cache_keys)

        self._setup_news_routes()

    async def _get_article(self, news_id: str) -> NewsArticle:
        """Validate the id and load the article, raising 400/404."""
        try:
            UUID(news_id)
        except ValueError:
            raise ValidationError("Invalid news ID", {"news_id": news_id})

        article = await self.repository.get(news_id)
        if article is None:
            raise NotFoundError("News article not found", {"news_id": news_id})
        return article

    def _setup_news_routes(self):
        """Set up news-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "news",
                "message": "Community Platform - News Service",
                "version": "1.0.0",
                "capabilities": ["articles", "likes", "comments", "caching"]
            }

        @self.app.get("/news")
        async def get_all_news(
            page: int = Query(1, ge=1, description="Page number"),
            limit: int = Query(10, ge=1, le=100, description="Articles per page")
        ):
            """List articles, newest first."""
            cache_key = self.cache_keys.list_key(page, limit)

            async def load():
                articles = await self.repository.list_recent()
                page_articles, pagination = paginate(articles, page, limit)
                return {
                    "news": [article.model_dump(mode="json") for article in page_articles],
                    "pagination": pagination.model_dump()
                }

            data = await self.cache.get_or_set(cache_key, load)
            return {"success": True, "data": data}

        @self.app.get("/news/{news_id}")
        async def get_news(news_id: str):
            """Single article; the response carries the incremented view count."""
            cache_key = self.cache_keys.item_key(news_id)
            cached = await self.cache.get_cache(cache_key)
            if cached is not None:
                return {"success": True, "data": cached}

            article = await self._get_article(news_id)
            await self.repository.increment_views(news_id)
            await self.invalidator.item_viewed(news_id)
            article.views += 1

            data = article.model_dump(mode="json")
            await self.cache.set_cache(cache_key, data)
            return {"success": True, "data": data}

        @self.app.post("/news", status_code=201)
        async def create_news(request: NewsCreate):
            """Publish an article."""
            article = await self.repository.create(request)
            await self.invalidator.item_created()
            return {"success": True, "data": article.model_dump(mode="json")}

        @self.app.put("/news/{news_id}")
        async def update_news(news_id: str, request: NewsUpdate):
            """Apply a partial update."""
            article = await self._get_article(news_id)

            changes = request.model_dump(exclude_unset=True)
            changes["updated_at"] = datetime.now(timezone.utc)
            try:
                article = NewsArticle.model_validate({**article.model_dump(), **changes})
            except PydanticValidationError as e:
                fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
                raise ValidationError("Invalid news update", details={"fields": fields}) from e

            await self.repository.save(article)
            await self.invalidator.item_changed(news_id)
            return {"success": True, "data": article.model_dump(mode="json")}

        @self.app.delete("/news/{news_id}")
        async def delete_news(news_id: str):
            """Delete an article."""
            await self._get_article(news_id)
            await self.repository.delete(news_id)
            await self.invalidator.item_changed(news_id)
            return {"success": True, "message": "News article deleted successfully"}

        @self.app.post("/news/{news_id}/like")
        async def toggle_like(news_id: str, request: LikeRequest):
            """Like the article, or remove an existing like."""
            article = await self._get_article(news_id)

            if request.user_id in article.likes:
                article.likes.remove(request.user_id)
                liked = False
            else:
                article.likes.append(request.user_id)
                liked = True

            await self.repository.save(article)
            await self.invalidator.item_changed(news_id)

            self.logger.info("Like toggled", news_id=news_id, user_id=request.user_id, liked=liked)
            return {"success": True, "data": article.model_dump(mode="json")}

        @self.app.post("/news/{news_id}/comments")
        async def add_comment(news_id: str, request: CommentCreate):
            """Append a comment."""
            if not request.content.strip():
                raise ValidationError("Comment content is required", {"news_id": news_id})

            article = await self._get_article(news_id)
            article.comments.append(Comment(user_id=request.user_id, content=request.content))

            await self.repository.save(article)
            await self.invalidator.item_changed(news_id)
            return {"success": True, "data": article.model_dump(mode="json")}


def create_app():
    """Create news service application."""
    service = NewsService()
    return service.app


if __name__ == "__main__":
    service = NewsService()
    service.run()
