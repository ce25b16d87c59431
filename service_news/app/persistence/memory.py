"""
In-memory persistence layer for news articles.
"""

from typing import Dict, List, Optional

from shared.logging import get_logger
from ..models import NewsArticle, NewsCreate


class InMemoryNewsRepository:
    """Authoritative record store for articles. Reads return copies."""

    def __init__(self):
        self.logger = get_logger("news.persistence.memory")
        self._articles: Dict[str, NewsArticle] = {}

    async def list_recent(self) -> List[NewsArticle]:
        return [article.model_copy(deep=True) for article in reversed(list(self._articles.values()))]

    async def get(self, news_id: str) -> Optional[NewsArticle]:
        article = self._articles.get(news_id)
        return article.model_copy(deep=True) if article else None

    async def create(self, data: NewsCreate) -> NewsArticle:
        article = NewsArticle(**data.model_dump())
        self._articles[article.id] = article
        self.logger.info("News article created", news_id=article.id)
        return article.model_copy(deep=True)

    async def save(self, article: NewsArticle) -> NewsArticle:
        self._articles[article.id] = article.model_copy(deep=True)
        return article

    async def increment_views(self, news_id: str) -> None:
        article = self._articles.get(news_id)
        if article is not None:
            article.views += 1

    async def delete(self, news_id: str) -> bool:
        return self._articles.pop(news_id, None) is not None
