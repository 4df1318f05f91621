"""
Entity storage for the on-call manager.

- EntityStore: the interface the API layer depends on
- MemoryStore: in-memory implementation (volatile)
"""

from .base import EntityStore
from .memory import MemoryStore

__all__ = ["EntityStore", "MemoryStore"]
