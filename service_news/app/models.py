"""
News article data models.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Comment(BaseModel):
    """Comment on an article."""
    user_id: str
    content: str
    created_at: datetime = Field(default_factory=_utcnow)


class NewsArticle(BaseModel):
    """News article."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    content: str
    excerpt: str = ""
    category: str = "general"
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    author_id: str
    views: int = 0
    likes: List[str] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class NewsCreate(BaseModel):
    """Request model for publishing an article."""
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    excerpt: str = ""
    category: str = "general"
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    author_id: str = Field(..., min_length=1)


class NewsUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    tags: Optional[List[str]] = None


class LikeRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class CommentCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    content: str = ""
