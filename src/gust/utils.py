"""Utility functions for gust."""

from datetime import datetime, timezone
from pathlib import Path
import os
import shutil
import tempfile


def atomic_write_text(path: Path, text: str) -> None:
    """Atomically write text to file.

    Writes to a temp file in the same directory, fsyncs it and renames it
    over the target, so readers never see a half-written file.

    Args:
        path: Target file path
        text: Text content to write
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix=""
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)

    try:
        os.replace(tmp, path)
    except BaseException:
        # Clean up temp file on any error
        tmp.unlink(missing_ok=True)
        raise


def copy_file(src: Path, dest: Path) -> None:
    """Copy a file, creating the destination directory as needed."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)


def format_timestamp(dt: datetime) -> str:
    """Format a timestamp as UTC ISO 8601 with a Z suffix.

    Examples:
        2020-03-01 12:00:00+08:00 -> "2020-03-01T04:00:00Z"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
