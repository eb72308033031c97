"""Shared test fixtures and utilities."""

import pytest

from gust.storage import MemorySnapshotStore

from tests.fixtures.history import GitHistory, entry_text


@pytest.fixture
def git_history(tmp_path):
    """Empty git repository with HEAD on refs/heads/main."""
    history = GitHistory(tmp_path / "repo")
    yield history
    history.repo.close()


@pytest.fixture
def memory_store():
    """Empty in-memory snapshot store."""
    return MemorySnapshotStore()


@pytest.fixture
def blog(git_history):
    """Repository with a posts/ directory and three commits.

    - first.md: written at t=1000, unchanged since
    - second.md: written at t=1000, edited at t=2000
    - draft.md: added at t=3000 without a publishable status
    """
    git_history.commit({
        "posts/first.md": entry_text("First", date="2020-01-01", desc="The first"),
        "posts/second.md": entry_text("Second", date="2020-02-01", author="Ann"),
        "README.md": "readme\n",
    }, timestamp=1000, message="initial")
    git_history.commit({
        "posts/second.md": entry_text("Second, edited", date="2020-02-01", author="Ann"),
    }, timestamp=2000, message="edit second")
    git_history.commit({
        "posts/draft.md": entry_text("Draft", status=None),
        "README.md": "readme v2\n",
    }, timestamp=3000, message="draft")
    return git_history
