"""Content identifiers compatible with git blob ids.

A git blob id is the SHA-1 of a short header followed by the raw bytes:

    sha1(b"blob <size>\\x00" + data)

Computing it locally lets a working file be compared with a committed
version without touching the object store.
"""

from pathlib import Path
import hashlib


def blob_id(data: bytes) -> str:
    """Compute the git blob id of in-memory content.

    Args:
        data: Raw file content

    Returns:
        40-character hex blob id
    """
    sha1 = hashlib.sha1()
    sha1.update(b"blob %d\x00" % len(data))
    sha1.update(data)
    return sha1.hexdigest()


def compute_file_blob_id(path: Path) -> str:
    """Compute the git blob id of a file's contents.

    The header needs the size up front, so it is taken from stat before
    the file is streamed.

    Args:
        path: Path to file to hash

    Returns:
        40-character hex blob id
    """
    sha1 = hashlib.sha1()
    sha1.update(b"blob %d\x00" % path.stat().st_size)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha1.update(chunk)
    return sha1.hexdigest()


__all__ = [
    "blob_id",
    "compute_file_blob_id",
]
