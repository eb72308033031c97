"""Core operations for gust."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import GustConfig, load_config
from .constants import ENTRIES_DIR, ENTRY_SUFFIX
from .context import RepoContext
from .core import Resolution
from .errors import EntryError
from .listing import Listing, build_listing, write_listing
from .oracle import WorkingTreeOracle
from .resolver import Resolver
from .utils import copy_file

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a build."""
    output: Path
    listing_path: Path
    listing: Listing
    resolution: Resolution


def load_build_config(
    ctx: RepoContext,
    gitref: Optional[str] = None,
    output: Optional[str] = None,
    fallback: Optional[str] = None,
) -> GustConfig:
    """Load the work tree's config with explicit (CLI/API) values on top."""
    return load_config(ctx.config_path).override(gitref=gitref, output=output, fallback=fallback)


def resolve_entries(ctx: RepoContext, config: GustConfig) -> Resolution:
    """Date every publishable entry in the context's entries directory."""
    entries = WorkingTreeOracle(ctx).current_entries()
    logger.debug("Resolving %d entries against %s", len(entries), config.gitref)
    resolver = Resolver(ctx.store, fallback=config.fallback)
    return resolver.resolve(entries, config.gitref)


def emit_entry(output: Path, source: Path, slug: str) -> Path:
    """Copy an entry's file to <output>/entries/<slug>.md."""
    dest = output / ENTRIES_DIR / f"{slug}{ENTRY_SUFFIX}"
    logger.info("Copy from %s", source)
    copy_file(source, dest)
    return dest


def build(
    entries_dir: Union[str, Path],
    output: Optional[Union[str, Path]] = None,
    gitref: Optional[str] = None,
    fallback: Optional[str] = None,
) -> BuildResult:
    """
    Resolve all entries, copy them to the output directory and write the listing.

    Nothing is written until every entry has been resolved, so a failed
    history walk leaves the output directory untouched.

    Args:
        entries_dir: Directory holding the entry files (inside a git work tree)
        output: Output directory (defaults to config, then ./gust_generated)
        gitref: Reference to date entries against (defaults to config, then HEAD)
        fallback: Timestamp policy for untracked entries ("now" or "reference")

    Returns:
        BuildResult describing what was written

    Raises:
        WorkingTreeUnavailable: If entries_dir is not inside a git work tree
        ReferenceNotFound: If gitref does not resolve
        CorruptHistory: If history cannot be read
        EntryError: If two entries would be published under the same slug
        ConfigError: If the config file is invalid
    """
    with RepoContext(entries_dir) as ctx:
        config = load_build_config(
            ctx,
            gitref=gitref,
            output=str(output) if output is not None else None,
            fallback=fallback,
        )
        resolution = resolve_entries(ctx, config)
        listing = build_listing(resolution)

        slugs = {}
        for entry in resolution.entries:
            if entry.slug in slugs:
                raise EntryError(
                    f"Entries {slugs[entry.slug]} and {entry.path} share the slug '{entry.slug}'"
                )
            slugs[entry.slug] = entry.path

        out = Path(config.output)
        for entry in sorted(resolution.entries, key=lambda e: e.slug):
            emit_entry(out, ctx.absolute(entry.path), entry.slug)

        listing_path = write_listing(listing, out)

    return BuildResult(
        output=out,
        listing_path=listing_path,
        listing=listing,
        resolution=resolution,
    )
