"""Working set of entries whose last change has not been found yet."""

from datetime import datetime
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .core import Entry, PendingItem, ResolutionSource, ResolvedEntry, Snapshot
from .errors import EntryError


Lookup = Callable[[str], Optional[str]]


class PendingSet:
    """
    Entries still being compared against older snapshots.

    Each ``partition`` call drains the items that differ at a snapshot into
    the resolved output and swaps in a container rebuilt from the survivors,
    so a path is pending at most once and resolved at most once.
    """

    def __init__(self) -> None:
        self._items: Dict[str, PendingItem] = {}
        self.comparisons = 0

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __contains__(self, path: object) -> bool:
        return path in self._items

    def __iter__(self) -> Iterator[PendingItem]:
        return iter(self._items.values())

    def seed(self, entries: Iterable[Entry], initial_timestamp: datetime) -> None:
        """Add entries with the reference snapshot's time as their candidate.

        Raises:
            EntryError: If a path is already pending
        """
        for entry in entries:
            if entry.path in self._items:
                raise EntryError(f"Entry {entry.path} is already pending")
            self._items[entry.path] = PendingItem(
                path=entry.path,
                content_id=entry.content_id,
                candidate_timestamp=initial_timestamp,
                entry=entry,
            )

    def partition(
        self,
        snapshot: Snapshot,
        lookup: Lookup,
    ) -> Tuple[List[ResolvedEntry], List[PendingItem]]:
        """
        Split pending items by whether their content matches a snapshot.

        Args:
            snapshot: Snapshot being compared, older than every snapshot
                compared before it
            lookup: Content identifier at a path in ``snapshot``'s tree

        Returns:
            (changed, unchanged). Changed items are resolved with their
            current candidate timestamp and removed from the set. Unchanged
            items stay pending with ``snapshot.timestamp`` as candidate.
        """
        changed: List[ResolvedEntry] = []
        survivors: Dict[str, PendingItem] = {}

        for path, item in self._items.items():
            self.comparisons += 1
            if lookup(path) == item.content_id:
                item.candidate_timestamp = snapshot.timestamp
                survivors[path] = item
            else:
                # Absent or different: the change happened after this snapshot
                changed.append(_resolve(item, ResolutionSource.CHANGED, snapshot.id))

        self._items = survivors
        return changed, list(survivors.values())

    def drain(self) -> List[ResolvedEntry]:
        """Resolve every remaining item as unchanged since the oldest snapshot seen."""
        resolved = [_resolve(item, ResolutionSource.ROOT) for item in self._items.values()]
        self._items = {}
        return resolved


def _resolve(
    item: PendingItem,
    source: ResolutionSource,
    changed_after: Optional[str] = None,
) -> ResolvedEntry:
    return ResolvedEntry(
        path=item.path,
        content_id=item.content_id,
        last_modified=item.candidate_timestamp,
        source=source,
        changed_after=changed_after,
        metadata=item.entry.metadata,
    )
