"""Git snapshot store backed by dulwich.

Uses dulwich (pure Python git implementation) to read commits and trees, so
the git binary is not required.
"""

import logging
import re
from datetime import datetime, timezone
from stat import S_ISDIR
from typing import Optional, Tuple

from dulwich.errors import ChecksumMismatch, ObjectFormatException
from dulwich.objects import S_ISGITLINK, Commit, ShaFile, Tag
from dulwich.objects import Tree as DulwichTree
from dulwich.repo import Repo

from ..errors import CorruptHistory, ReferenceNotFound

logger = logging.getLogger(__name__)

_HEXSHA_RE = re.compile(r"[0-9a-f]{40}")

# Same precedence git uses when expanding a short ref name
_REF_PREFIXES = (b"", b"refs/", b"refs/tags/", b"refs/heads/", b"refs/remotes/")

_READ_ERRORS = (KeyError, ObjectFormatException, ChecksumMismatch)


class GitTree:
    """A commit's tree, looked up one path component at a time."""

    def __init__(self, store: "GitSnapshotStore", tree: DulwichTree, snapshot_id: str):
        self._store = store
        self._tree = tree
        self.snapshot_id = snapshot_id

    def lookup(self, path: str) -> Optional[str]:
        """Blob id at a path, or None if missing, a directory or a submodule.

        Only work-tree-relative paths can match; an absolute path never does.
        """
        if path.startswith("/"):
            return None
        parts = [p.encode("utf-8") for p in path.split("/") if p]
        if not parts:
            return None

        tree = self._tree
        for depth, name in enumerate(parts, start=1):
            try:
                mode, sha = tree[name]
            except KeyError:
                return None

            if depth == len(parts):
                if S_ISDIR(mode) or S_ISGITLINK(mode):
                    return None
                return sha.decode("ascii")

            if not S_ISDIR(mode):
                # A file where a directory was expected
                return None
            tree = self._store._load(sha, DulwichTree, self.snapshot_id)

        return None


class GitSnapshotStore:
    """
    Read-only view of a git repository's first-parent history.

    The last commit read is kept so the tree, parent and timestamp of one
    snapshot cost a single object load.
    """

    def __init__(self, repo: Repo):
        self.repo = repo
        self._last: Optional[Tuple[str, Commit]] = None

    def resolve_reference(self, name: str) -> str:
        """
        Resolve HEAD, a full or short ref name, or a full commit id.

        Annotated tags are peeled to the commit they point at.
        """
        if not name.strip():
            raise ReferenceNotFound(name, "empty reference")
        raw = name.encode("utf-8")
        for prefix in _REF_PREFIXES:
            try:
                sha = self.repo.refs[prefix + raw]
            except KeyError:
                continue
            logger.debug("Resolved %s via %s", name, (prefix + raw).decode("utf-8"))
            return self._peel_to_commit(sha, name)

        if _HEXSHA_RE.fullmatch(name) and raw in self.repo.object_store:
            return self._peel_to_commit(raw, name)

        raise ReferenceNotFound(name)

    def tree_of(self, snapshot_id: str) -> GitTree:
        commit = self._commit(snapshot_id)
        tree = self._load(commit.tree, DulwichTree, snapshot_id)
        return GitTree(self, tree, snapshot_id)

    def ancestor_of(self, snapshot_id: str) -> Optional[str]:
        parents = self._commit(snapshot_id).parents
        if not parents:
            return None
        return parents[0].decode("ascii")

    def timestamp_of(self, snapshot_id: str) -> datetime:
        commit = self._commit(snapshot_id)
        return datetime.fromtimestamp(commit.commit_time, tz=timezone.utc)

    def _commit(self, snapshot_id: str) -> Commit:
        if self._last is not None and self._last[0] == snapshot_id:
            return self._last[1]
        commit = self._load(snapshot_id.encode("ascii"), Commit, snapshot_id)
        self._last = (snapshot_id, commit)
        return commit

    def _load(self, sha: bytes, expected: type, snapshot_id: str) -> ShaFile:
        try:
            obj = self.repo.object_store[sha]
        except _READ_ERRORS as e:
            raise CorruptHistory(snapshot_id, f"cannot read object {sha.decode('ascii')}: {e!r}")
        if not isinstance(obj, expected):
            raise CorruptHistory(
                snapshot_id,
                f"object {sha.decode('ascii')} is a {obj.type_name.decode('ascii')}, "
                f"expected a {expected.type_name.decode('ascii')}",
            )
        return obj

    def _peel_to_commit(self, sha: bytes, name: str) -> str:
        try:
            obj = self.repo.object_store[sha]
            while isinstance(obj, Tag):
                obj = self.repo.object_store[obj.object[1]]
        except _READ_ERRORS as e:
            raise ReferenceNotFound(name, f"cannot read object: {e!r}")
        if not isinstance(obj, Commit):
            raise ReferenceNotFound(name, f"points to a {obj.type_name.decode('ascii')}")
        return obj.id.decode("ascii")
