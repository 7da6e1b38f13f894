"""Entity stores."""

from .base import ID_KEY, TYPE_KEY, Store
from .memory import MemoryStore, Relation

__all__ = ["ID_KEY", "TYPE_KEY", "Store", "MemoryStore", "Relation"]
