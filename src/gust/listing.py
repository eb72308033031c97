"""Listing of published entries (listing.json)."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from .constants import LISTING_FILE
from .core import CalendarDate, Resolution, ResolvedEntry
from .utils import atomic_write_text, format_timestamp

logger = logging.getLogger(__name__)


class ListingPost(BaseModel):
    """One published entry as it appears in the listing."""

    slug: str
    desc: Optional[str] = None
    author: Optional[str] = None
    date: CalendarDate
    last_modified: datetime

    @field_serializer("last_modified")
    def _serialize_last_modified(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_resolved(cls, entry: ResolvedEntry) -> "ListingPost":
        """Build a post from a resolved entry carrying its front-matter."""
        if entry.metadata is None:
            raise ValueError(f"Entry {entry.path} has no front-matter to publish")
        return cls(
            slug=entry.slug,
            desc=entry.metadata.desc,
            author=entry.metadata.author,
            date=entry.metadata.date,
            last_modified=entry.last_modified,
        )


class Listing(BaseModel):
    """All published entries."""

    entries: List[ListingPost] = Field(default_factory=list)


def build_listing(resolution: Resolution) -> Listing:
    """Build the listing for a resolution, sorted by slug."""
    posts = [ListingPost.from_resolved(entry) for entry in resolution.entries]
    posts.sort(key=lambda post: post.slug)
    return Listing(entries=posts)


def write_listing(listing: Listing, output: Path) -> Path:
    """Write listing.json into the output directory.

    Returns:
        Path of the written file
    """
    listing_path = Path(output) / LISTING_FILE
    logger.info("Dumping listing to %s", listing_path)
    atomic_write_text(listing_path, listing.model_dump_json())
    return listing_path


def read_listing(output: Path) -> Listing:
    """Load a previously written listing.json."""
    listing_path = Path(output) / LISTING_FILE
    return Listing.model_validate_json(listing_path.read_text(encoding="utf-8"))
