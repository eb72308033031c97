"""Core data models for gust.

Resolution Lifecycle:
---------------------
Every entry is built once per run and ends in exactly one terminal state:

1. UNTRACKED: absent from the reference snapshot's tree, dated with the
   fallback timestamp without entering the history walk.
2. CHANGED: the walk found the boundary where the content differs, dated
   with the newest snapshot still identical to the current content.
3. ROOT: the walk ran out of ancestry first, dated with the oldest
   snapshot visited ("unchanged since the beginning").

Resolved entries are frozen and never mutated afterwards.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Front-matter has a field named "date"; keep the type reachable under another name
CalendarDate = date


# ============= Entry Metadata =============

class EntryStatus(str, Enum):
    """Publication status declared in an entry's front-matter."""

    ONGOING = "ongoing"
    UNSPECIFIED = "unspecified"


class Frontmatter(BaseModel):
    """Front-matter block at the top of an entry file."""

    status: EntryStatus = EntryStatus.UNSPECIFIED
    desc: Optional[str] = None
    author: Optional[str] = None
    date: CalendarDate

    @property
    def is_publishable(self) -> bool:
        return self.status != EntryStatus.UNSPECIFIED


# ============= History =============

class Snapshot(BaseModel):
    """An immutable, timestamped state of the whole tracked tree (a commit)."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    parent_id: Optional[str] = None


# ============= Entries =============

class Entry(BaseModel):
    """A tracked unit of content as it exists now.

    All paths are POSIX strings relative to the work tree root.
    """

    path: str
    content_id: str
    fallback_timestamp: Optional[datetime] = None
    metadata: Optional[Frontmatter] = None

    @property
    def slug(self) -> str:
        return path_to_slug(self.path)


@dataclass
class PendingItem:
    """An entry whose last-changed snapshot is not known yet.

    ``candidate_timestamp`` is the newest snapshot time at which the content
    was observed unchanged. It is overwritten on every walk step.
    """
    path: str
    content_id: str
    candidate_timestamp: datetime
    entry: Entry


class ResolutionSource(str, Enum):
    """How an entry's last-modified timestamp was determined."""

    CHANGED = "changed"
    ROOT = "root"
    UNTRACKED = "untracked"


class ResolvedEntry(BaseModel):
    """An entry with its final last-modified timestamp."""

    model_config = ConfigDict(frozen=True)

    path: str
    content_id: str
    last_modified: datetime
    source: ResolutionSource
    changed_after: Optional[str] = None  # first snapshot seen with different content
    metadata: Optional[Frontmatter] = None

    @property
    def slug(self) -> str:
        return path_to_slug(self.path)


@dataclass(slots=True)
class WalkStats:
    """Work performed by one history walk."""

    snapshots_visited: int = 0


class Resolution(BaseModel):
    """Result of resolving a set of entries against history."""

    reference: str
    reference_id: str
    reference_timestamp: datetime
    entries: List[ResolvedEntry] = Field(default_factory=list)
    snapshots_visited: int = 0
    comparisons: int = 0

    def by_path(self) -> dict:
        """Index resolved entries by path."""
        return {entry.path: entry for entry in self.entries}

    @property
    def summary(self) -> dict:
        """Get counts by resolution source."""
        counts = {}
        for entry in self.entries:
            counts[entry.source] = counts.get(entry.source, 0) + 1
        return counts


def path_to_slug(path: str) -> str:
    """Slug of an entry: its file name without the extension."""
    return PurePosixPath(path).stem
