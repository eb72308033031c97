"""In-memory snapshot store for tests and embedders.

Histories are built commit by commit, each commit becoming the parent of the
next. Snapshot identifiers are content hashes of the commit, so identical
histories get identical identifiers.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from ..errors import CorruptHistory, ReferenceNotFound


@dataclass
class MemoryTree:
    """Flat mapping of path -> content identifier."""

    files: Dict[str, str] = field(default_factory=dict)

    def lookup(self, path: str) -> Optional[str]:
        return self.files.get(path)


@dataclass
class _MemoryCommit:
    tree: MemoryTree
    timestamp: datetime
    parent_id: Optional[str]


class MemorySnapshotStore:
    """
    Linear history held in memory.

    ``tree_fetches`` counts calls to ``tree_of`` so callers can check how
    much history was actually read.
    """

    def __init__(self, head: str = "HEAD"):
        self.head = head
        self.refs: Dict[str, str] = {}
        self.tree_fetches = 0
        self._commits: Dict[str, _MemoryCommit] = {}

    def commit(
        self,
        files: Mapping[str, str],
        timestamp: datetime,
        ref: Optional[str] = None,
    ) -> str:
        """
        Record a snapshot on top of the current head.

        Args:
            files: Path -> content identifier for the whole tree
            timestamp: Snapshot time (naive values are taken as UTC)
            ref: Reference to advance (defaults to the head reference)

        Returns:
            Identifier of the new snapshot
        """
        ref = ref or self.head
        parent_id = self.refs.get(ref)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        h = hashlib.sha1()
        h.update((parent_id or "").encode("utf-8"))
        h.update(b"\x00")
        h.update(timestamp.isoformat().encode("utf-8"))
        for path in sorted(files):
            h.update(b"\x00")
            h.update(path.encode("utf-8"))
            h.update(b"\x00")
            h.update(files[path].encode("utf-8"))
        snapshot_id = h.hexdigest()

        self._commits[snapshot_id] = _MemoryCommit(
            tree=MemoryTree(dict(files)),
            timestamp=timestamp,
            parent_id=parent_id,
        )
        self.refs[ref] = snapshot_id
        return snapshot_id

    def history(self, ref: Optional[str] = None) -> List[str]:
        """Snapshot identifiers from the reference back to the root."""
        ids = []
        current = self.refs.get(ref or self.head)
        while current is not None:
            ids.append(current)
            current = self._commits[current].parent_id
        return ids

    def forget(self, snapshot_id: str) -> None:
        """Drop a snapshot's data, as if the object store lost it."""
        self._commits.pop(snapshot_id, None)

    # ---- SnapshotStore ----

    def resolve_reference(self, name: str) -> str:
        if name in self.refs:
            return self.refs[name]
        if name in self._commits:
            return name
        raise ReferenceNotFound(name)

    def tree_of(self, snapshot_id: str) -> MemoryTree:
        self.tree_fetches += 1
        return self._get(snapshot_id).tree

    def ancestor_of(self, snapshot_id: str) -> Optional[str]:
        return self._get(snapshot_id).parent_id

    def timestamp_of(self, snapshot_id: str) -> datetime:
        return self._get(snapshot_id).timestamp

    def _get(self, snapshot_id: str) -> _MemoryCommit:
        try:
            return self._commits[snapshot_id]
        except KeyError:
            raise CorruptHistory(snapshot_id, "snapshot not found in store")
