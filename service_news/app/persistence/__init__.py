"""
Persistence for news articles.
"""

from .memory import InMemoryNewsRepository

__all__ = ["InMemoryNewsRepository"]
