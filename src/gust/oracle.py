"""Current entries read from the working tree."""

import logging
from pathlib import Path
from typing import List, Optional

from .context import RepoContext
from .core import Entry
from .errors import FrontmatterError, WorkingTreeUnavailable
from .frontmatter import read_frontmatter
from .hashing import compute_file_blob_id

logger = logging.getLogger(__name__)


class WorkingTreeOracle:
    """Lists publishable entries in an entries directory.

    Only files directly inside the directory are considered, symlinks
    included under their own name. Files without front-matter or with
    ``status: unspecified`` are not entries; files that cannot be read or
    whose front-matter is invalid are excluded with a warning.
    """

    def __init__(self, ctx: RepoContext, entries_dir: Optional[Path] = None):
        self.ctx = ctx
        self.entries_dir = Path(entries_dir).resolve() if entries_dir else ctx.entries_dir

    def current_entries(self) -> List[Entry]:
        entries = []
        for file_path in sorted(self.entries_dir.iterdir()):
            if not file_path.is_file():
                continue
            logger.debug("Staged file %s", file_path)

            try:
                fm = read_frontmatter(file_path)
            except FrontmatterError as e:
                logger.warning("Skipping %s: %s", file_path.name, e.reason)
                continue
            except OSError as e:
                logger.warning("Skipping %s: cannot read file (%s)", file_path.name, e)
                continue

            if fm is None:
                logger.debug("Skipping %s: no front-matter", file_path.name)
                continue
            if not fm.is_publishable:
                logger.debug("Skipping %s: status is unspecified", file_path.name)
                continue

            entries.append(Entry(
                path=self._entry_path(file_path),
                content_id=compute_file_blob_id(file_path),
                metadata=fm,
            ))
        return entries

    def _entry_path(self, file_path: Path) -> str:
        try:
            return self.ctx.relative(file_path)
        except WorkingTreeUnavailable:
            # No tree lookup can match an absolute path, so the entry is untracked
            logger.info("Found %s out of tree", file_path.name)
            return file_path.as_posix()
