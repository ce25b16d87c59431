"""
Store item data models.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoreItemStatus(str, Enum):
    """Moderation status of a store item."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Review(BaseModel):
    """A user's rating of an item. One review per user name."""
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = "No comment provided"
    created_at: datetime = Field(default_factory=_utcnow)


class StoreItem(BaseModel):
    """Marketplace item."""
    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    description: str = ""
    category: str
    price: float = 0.0
    author_id: str
    author_name: Optional[str] = None
    status: StoreItemStatus = StoreItemStatus.PENDING
    tags: List[str] = Field(default_factory=list)
    views: int = 0
    reviews: List[Review] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class StoreItemCreate(BaseModel):
    """Request model for adding an item."""
    name: str = Field(..., min_length=1, description="Item name")
    description: str = Field("", description="Item description")
    category: str = Field(..., min_length=1, description="Item category")
    price: float = Field(0.0, ge=0, description="Price, 0 for free items")
    author_id: str = Field(..., min_length=1, description="Author user ID")
    author_name: Optional[str] = Field(None, description="Author display name")
    tags: List[str] = Field(default_factory=list)


class ReviewCreate(BaseModel):
    """Request model for adding or replacing a review."""
    user_name: str = Field(..., min_length=1, description="Reviewer name")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Optional review text")
