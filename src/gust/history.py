"""Early-terminating walk through snapshot ancestry."""

import logging
from typing import Iterator, Optional

from .core import ResolvedEntry, Snapshot, WalkStats
from .pending import PendingSet
from .storage.base import SnapshotStore, Tree

logger = logging.getLogger(__name__)


class HistoryWalker:
    """Walks from a reference snapshot back through first-parent ancestry.

    Snapshots are visited strictly newest to oldest; each visited snapshot is
    the parent of the one before it. The walk reads one tree per snapshot and
    stops as soon as nothing is pending, so the history read is bounded by
    the depth at which the last entry resolves rather than by its length.
    """

    def __init__(self, store: SnapshotStore):
        self.store = store
        self.stats = WalkStats()

    def walk(
        self,
        start_id: str,
        pending: PendingSet,
        start_tree: Optional[Tree] = None,
    ) -> Iterator[ResolvedEntry]:
        """
        Resolve pending entries whose content differs somewhere in history.

        Entries that never differ are left in ``pending`` for the caller to
        drain once ancestry is exhausted.

        Args:
            start_id: Reference snapshot to start from
            pending: Working set, shrunk in place
            start_tree: Tree of the start snapshot, if the caller already has it

        Yields:
            Entries resolved at a change boundary

        Raises:
            CorruptHistory: If a snapshot along the chain cannot be read
        """
        snapshot_id = start_id
        tree = start_tree

        while snapshot_id is not None and pending:
            if tree is None:
                tree = self.store.tree_of(snapshot_id)
            snapshot = Snapshot(
                id=snapshot_id,
                timestamp=self.store.timestamp_of(snapshot_id),
                parent_id=self.store.ancestor_of(snapshot_id),
            )
            self.stats.snapshots_visited += 1

            changed, unchanged = pending.partition(snapshot, tree.lookup)
            for resolved in changed:
                logger.info("Found %s changed from %s", resolved.slug, snapshot.id)
                yield resolved
            logger.debug(
                "Snapshot %s: %d changed, %d still pending",
                snapshot.id[:12], len(changed), len(unchanged),
            )

            snapshot_id = snapshot.parent_id
            tree = None

        if not pending:
            logger.debug("All entries resolved after %d snapshots", self.stats.snapshots_visited)
