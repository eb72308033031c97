"""Custom exceptions for gust.

All failures raised while resolving history are fatal for the run: nothing is
retried and no partial listing is produced. The CLI is the only place that
turns these into exit codes.
"""

from pathlib import Path
from typing import Union


class GustError(RuntimeError):
    """Base class for all gust errors."""
    pass


# History Errors
class HistoryError(GustError):
    """Base class for errors reading the snapshot history."""
    pass


class ReferenceNotFound(HistoryError):
    """The starting reference does not resolve to a snapshot."""

    def __init__(self, reference: str, reason: str = ""):
        self.reference = reference
        self.reason = reason
        message = f"Reference '{reference}' does not resolve to a commit"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class CorruptHistory(HistoryError):
    """A snapshot's tree or ancestry cannot be read."""

    def __init__(self, snapshot_id: str, reason: str):
        self.snapshot_id = snapshot_id
        self.reason = reason
        super().__init__(
            f"Cannot read snapshot {snapshot_id[:12]}: {reason}. "
            f"The history may be corrupted or incomplete (shallow clone?)."
        )


# Working Tree Errors
class WorkingTreeUnavailable(GustError):
    """The live content root cannot be located."""

    def __init__(self, path: Union[str, Path], reason: str = "not inside a git work tree"):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot use {self.path} as entries directory: {reason}")


# Entry Errors
class EntryError(GustError):
    """Base class for errors about a single entry."""
    pass


class FrontmatterError(EntryError):
    """Entry front-matter is malformed or fails validation."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Invalid front-matter in {self.path}: {reason}")


# Configuration Errors
class ConfigError(GustError):
    """Configuration file is unreadable or invalid."""
    pass
