"""
Persistence for store items.
"""

from .memory import InMemoryStoreItemRepository

__all__ = ["InMemoryStoreItemRepository"]
