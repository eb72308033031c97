"""Resolve last-modified timestamps for entries from snapshot history."""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from .constants import DEFAULT_FALLBACK, DEFAULT_GITREF, FALLBACK_POLICIES
from .core import Entry, Resolution, ResolutionSource, ResolvedEntry
from .errors import EntryError
from .history import HistoryWalker
from .pending import PendingSet
from .storage.base import SnapshotStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Resolver:
    """Dates every entry against history in a single pass.

    Entries absent from the reference tree are dated with a fallback
    timestamp straight away. The rest are seeded into a PendingSet and
    resolved by walking history back from the reference; whatever is still
    pending when ancestry runs out has been unchanged since the beginning.

    Any history error aborts the run: there is no partial Resolution.
    """

    def __init__(
        self,
        store: SnapshotStore,
        fallback: str = DEFAULT_FALLBACK,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize resolver.

        Args:
            store: History to resolve against
            fallback: Timestamp policy for entries absent from the reference
                tree, "now" (wall-clock time) or "reference" (reference
                snapshot time). Overridden by an entry's own fallback_timestamp.
            clock: Source of the current time
        """
        if fallback not in FALLBACK_POLICIES:
            raise ValueError(
                f"Unknown fallback policy '{fallback}' (expected one of {', '.join(FALLBACK_POLICIES)})"
            )
        self.store = store
        self.fallback = fallback
        self.clock = clock

    def resolve(self, entries: Iterable[Entry], reference: str = DEFAULT_GITREF) -> Resolution:
        """
        Compute the last-modified timestamp of every entry.

        Args:
            entries: Current entries, unique by path
            reference: Name of the snapshot to walk back from

        Returns:
            Resolution holding one ResolvedEntry per input entry

        Raises:
            ReferenceNotFound: If the reference does not resolve
            CorruptHistory: If history cannot be read
            EntryError: If two entries share a path
        """
        reference_id = self.store.resolve_reference(reference)
        reference_time = self.store.timestamp_of(reference_id)
        reference_tree = self.store.tree_of(reference_id)

        resolved: List[ResolvedEntry] = []
        pending = PendingSet()
        now: Optional[datetime] = None
        seen = set()

        for entry in entries:
            if entry.path in seen:
                raise EntryError(f"Entry {entry.path} appears more than once")
            seen.add(entry.path)

            if reference_tree.lookup(entry.path) is not None:
                pending.seed([entry], reference_time)
                continue

            logger.info("Found %s out of tree", entry.slug)
            if entry.fallback_timestamp is not None:
                fallback_time = entry.fallback_timestamp
            elif self.fallback == "reference":
                fallback_time = reference_time
            else:
                if now is None:
                    now = self.clock()
                fallback_time = now
            resolved.append(ResolvedEntry(
                path=entry.path,
                content_id=entry.content_id,
                last_modified=fallback_time,
                source=ResolutionSource.UNTRACKED,
                metadata=entry.metadata,
            ))

        walker = HistoryWalker(self.store)
        resolved.extend(walker.walk(reference_id, pending, start_tree=reference_tree))

        for item in pending.drain():
            logger.info("%s was there ever since the beginning", item.slug)
            resolved.append(item)

        return Resolution(
            reference=reference,
            reference_id=reference_id,
            reference_timestamp=reference_time,
            entries=resolved,
            snapshots_visited=walker.stats.snapshots_visited,
            comparisons=pending.comparisons,
        )
