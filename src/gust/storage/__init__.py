"""Storage package for snapshot history backends."""

from .base import ContentOracle, SnapshotStore, Tree
from .git import GitSnapshotStore
from .memory import MemorySnapshotStore

__all__ = [
    "ContentOracle",
    "GitSnapshotStore",
    "MemorySnapshotStore",
    "SnapshotStore",
    "Tree",
]
