"""Base protocols for snapshot history backends."""

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core import Entry


class Tree(Protocol):
    """The content of one snapshot, addressed by relative path."""

    def lookup(self, path: str) -> Optional[str]:
        """
        Find the content identifier stored at a path.

        Args:
            path: POSIX path relative to the tree root

        Returns:
            Content identifier, or None if the path is absent or not a file
        """
        ...


class SnapshotStore(Protocol):
    """
    Protocol for read-only, content-addressed history.

    Every method is a blocking call. Any failure to read history is fatal
    for the caller; implementations never return partial data.
    """

    def resolve_reference(self, name: str) -> str:
        """
        Resolve a reference name to a snapshot identifier.

        Raises:
            ReferenceNotFound: If the name does not resolve to a snapshot
        """
        ...

    def tree_of(self, snapshot_id: str) -> Tree:
        """
        Get the tree recorded by a snapshot.

        Raises:
            CorruptHistory: If the snapshot or its tree cannot be read
        """
        ...

    def ancestor_of(self, snapshot_id: str) -> Optional[str]:
        """
        Get the parent snapshot along the first-parent chain.

        Returns:
            Parent identifier, or None for a root snapshot
        """
        ...

    def timestamp_of(self, snapshot_id: str) -> datetime:
        """Get the (timezone-aware, UTC) time a snapshot was recorded."""
        ...


class ContentOracle(Protocol):
    """Supplies the entries as they currently exist."""

    def current_entries(self) -> Sequence[Entry]:
        ...
