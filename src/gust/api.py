"""Stable API for gust.

A small surface for site generators and scripts that want entry timestamps
or a full build without going through the CLI.
"""

from pathlib import Path
from typing import Optional, Union

from .context import RepoContext
from .core import Resolution
from .ops import build, load_build_config, resolve_entries


def resolve_dir(entries_dir: Union[str, Path], gitref: Optional[str] = None) -> Resolution:
    """Resolve last-modified timestamps for the entries in a directory.

    Args:
        entries_dir: Directory holding the entry files (inside a git work tree)
        gitref: Reference to date entries against (defaults to config, then HEAD)

    Returns:
        Resolution with one ResolvedEntry per publishable entry

    Example:
        >>> from gust.api import resolve_dir
        >>> for entry in resolve_dir("posts").entries:
        ...     print(entry.slug, entry.last_modified)
    """
    with RepoContext(entries_dir) as ctx:
        config = load_build_config(ctx, gitref=gitref)
        return resolve_entries(ctx, config)


def build_dir(
    entries_dir: Union[str, Path],
    output: Optional[Union[str, Path]] = None,
    gitref: Optional[str] = None,
) -> Path:
    """Build the output directory and return the path of listing.json."""
    return build(entries_dir, output=output, gitref=gitref).listing_path
