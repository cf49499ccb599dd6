"""Document tree persistence."""

from .base import ContentStore, StoreError
from .memory import InMemoryContentStore, Stats

__all__ = [
    "ContentStore",
    "StoreError",
    "InMemoryContentStore",
    "Stats",
]
