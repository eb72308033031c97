"""Repository context for locating the work tree and entry paths."""

from pathlib import Path, PurePosixPath
from typing import Optional, Union

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

from .constants import CONFIG_FILE, GUST_DIR
from .errors import WorkingTreeUnavailable
from .storage.git import GitSnapshotStore


class RepoContext:
    """Finds the git work tree that contains an entries directory."""

    def __init__(self, entries_dir: Union[str, Path]):
        """Discover the repository by walking up from the entries directory.

        Args:
            entries_dir: Directory holding the entry files

        Raises:
            WorkingTreeUnavailable: If the directory is missing, not inside a
                git repository, or the repository has no work tree
        """
        path = Path(entries_dir)
        if not path.is_dir():
            raise WorkingTreeUnavailable(path, "not a directory")
        self.entries_dir = path.resolve()

        try:
            self.repo = Repo.discover(str(self.entries_dir))
        except NotGitRepository:
            raise WorkingTreeUnavailable(path)
        if self.repo.bare:
            raise WorkingTreeUnavailable(path, "repository has no work tree")

        self.root = Path(self.repo.path).resolve()
        self._store: Optional[GitSnapshotStore] = None

    def relative(self, path: Union[str, Path]) -> str:
        """Convert a path inside the work tree to a POSIX work-tree-relative path.

        Only the parent directory is resolved: a symlinked file keeps its own
        name and location.
        """
        p = Path(path)
        if not p.is_absolute():
            p = Path.cwd() / p
        p = p.parent.resolve() / p.name
        try:
            return PurePosixPath(p.relative_to(self.root)).as_posix()
        except ValueError:
            raise WorkingTreeUnavailable(p, f"outside work tree {self.root}")

    def absolute(self, relative_path: str) -> Path:
        """Get absolute path from work-tree-relative path."""
        return self.root / relative_path

    @property
    def store(self) -> GitSnapshotStore:
        """Snapshot store over this repository's history."""
        if self._store is None:
            self._store = GitSnapshotStore(self.repo)
        return self._store

    @property
    def config_path(self) -> Path:
        """Get path to config file."""
        return self.root / GUST_DIR / CONFIG_FILE

    def close(self) -> None:
        self.repo.close()

    def __enter__(self) -> "RepoContext":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
