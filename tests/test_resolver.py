"""Tests for the history walk and resolver on an in-memory history."""

import pytest

from gust.core import Entry, ResolutionSource
from gust.errors import CorruptHistory, EntryError, GustError, ReferenceNotFound
from gust.history import HistoryWalker
from gust.pending import PendingSet
from gust.resolver import Resolver

from tests.fixtures.history import ts


NOW = ts(999_999)


def fixed_clock():
    return NOW


def entries(**content_ids):
    return [Entry(path=f"{name}.md", content_id=cid) for name, cid in content_ids.items()]


@pytest.fixture
def three_commits(memory_store):
    """S0(root, t=100) <- S1(t=200) <- S2(HEAD, t=300)."""
    memory_store.commit({"a.md": "Y", "b.md": "X"}, ts(100))
    memory_store.commit({"a.md": "X", "b.md": "X"}, ts(200))
    memory_store.commit({"a.md": "X", "b.md": "X"}, ts(300))
    return memory_store


class TestScenario:
    """The three-entry scenario: changed, unchanged since root, untracked."""

    def test_scenario(self, three_commits):
        resolver = Resolver(three_commits, clock=fixed_clock)

        resolution = resolver.resolve(entries(a="X", b="X", c="Z"))
        by_path = resolution.by_path()

        assert by_path["a.md"].last_modified == ts(200)
        assert by_path["a.md"].source == ResolutionSource.CHANGED
        assert by_path["b.md"].last_modified == ts(100)
        assert by_path["b.md"].source == ResolutionSource.ROOT
        assert by_path["c.md"].last_modified == NOW
        assert by_path["c.md"].source == ResolutionSource.UNTRACKED

    def test_every_entry_resolved_exactly_once(self, three_commits):
        resolution = Resolver(three_commits, clock=fixed_clock).resolve(entries(a="X", b="X", c="Z"))

        paths = [entry.path for entry in resolution.entries]
        assert sorted(paths) == ["a.md", "b.md", "c.md"]

    def test_untracked_entry_costs_no_comparisons(self, three_commits):
        """Only a and b are compared, at each of the three snapshots."""
        resolution = Resolver(three_commits, clock=fixed_clock).resolve(entries(a="X", b="X", c="Z"))

        assert resolution.snapshots_visited == 3
        assert resolution.comparisons == 6

    def test_reference_metadata(self, three_commits):
        resolution = Resolver(three_commits).resolve(entries(a="X"))

        assert resolution.reference == "HEAD"
        assert resolution.reference_id == three_commits.refs["HEAD"]
        assert resolution.reference_timestamp == ts(300)
        assert resolution.summary == {ResolutionSource.CHANGED: 1}


class TestBoundary:
    """The resolved time is that of the oldest snapshot still identical."""

    @pytest.mark.parametrize("k", [0, 1, 2, 3, 4])
    def test_change_at_snapshot_k(self, memory_store, k):
        # Snapshots 0..5, content differs at k and is identical from k+1 to 5
        for i in range(6):
            memory_store.commit({"a.md": "OLD" if i <= k else "NEW"}, ts(100 * (i + 1)))

        resolution = Resolver(memory_store).resolve(entries(a="NEW"))
        resolved = resolution.entries[0]

        assert resolved.last_modified == ts(100 * (k + 2))
        assert resolved.source == ResolutionSource.CHANGED

    def test_deleted_then_restored_uses_latest_run(self, memory_store):
        """Only the unbroken run back from the reference counts."""
        memory_store.commit({"a.md": "X"}, ts(100))
        memory_store.commit({}, ts(200))
        memory_store.commit({"a.md": "X"}, ts(300))
        memory_store.commit({"a.md": "X"}, ts(400))

        resolved = Resolver(memory_store).resolve(entries(a="X")).entries[0]

        assert resolved.last_modified == ts(300)

    def test_unchanged_since_root(self, memory_store):
        for i in range(5):
            memory_store.commit({"a.md": "X", "other.md": str(i)}, ts(100 * (i + 1)))

        resolved = Resolver(memory_store).resolve(entries(a="X")).entries[0]

        assert resolved.last_modified == ts(100)
        assert resolved.source == ResolutionSource.ROOT

    def test_single_snapshot_history(self, memory_store):
        memory_store.commit({"a.md": "X"}, ts(100))

        resolved = Resolver(memory_store).resolve(entries(a="X")).entries[0]

        assert resolved.last_modified == ts(100)
        assert resolved.source == ResolutionSource.ROOT

    def test_uncommitted_edit_resolves_at_reference(self, three_commits):
        """Working content that differs from the reference changed after it."""
        resolved = Resolver(three_commits).resolve(entries(a="EDITED")).entries[0]

        assert resolved.last_modified == ts(300)
        assert resolved.changed_after == three_commits.refs["HEAD"]


class TestTermination:
    """The walk stops as soon as nothing is pending."""

    def test_deep_history_resolved_at_depth_one(self, memory_store):
        for i in range(200):
            memory_store.commit({"a.md": f"a{i}", "b.md": f"b{i}"}, ts(1000 + i))
        memory_store.tree_fetches = 0

        resolution = Resolver(memory_store).resolve(entries(a="a199", b="b199"))

        assert memory_store.tree_fetches == 2
        assert resolution.snapshots_visited == 2
        assert resolution.comparisons == 4
        assert all(entry.last_modified == ts(1199) for entry in resolution.entries)

    def test_cost_bounded_by_depth_and_entries(self, memory_store):
        depth = 20
        for i in range(depth):
            memory_store.commit({"a.md": "X", "b.md": "X", "c.md": str(i)}, ts(100 + i))
        memory_store.tree_fetches = 0

        resolution = Resolver(memory_store).resolve(entries(a="X", b="X", c="19"))

        assert memory_store.tree_fetches <= depth
        assert resolution.comparisons <= 3 * depth

    def test_no_walk_when_everything_is_untracked(self, three_commits):
        three_commits.tree_fetches = 0

        resolution = Resolver(three_commits, clock=fixed_clock).resolve(entries(new="Z"))

        assert three_commits.tree_fetches == 1  # reference tree only
        assert resolution.snapshots_visited == 0
        assert resolution.entries[0].last_modified == NOW

    def test_history_beyond_resolution_is_never_read(self, memory_store):
        memory_store.commit({"a.md": "X"}, ts(100))
        memory_store.commit({"a.md": "Y"}, ts(200))
        memory_store.commit({"a.md": "Z"}, ts(300))
        root = memory_store.history()[-1]
        memory_store.forget(root)

        resolved = Resolver(memory_store).resolve(entries(a="Z")).entries[0]

        assert resolved.last_modified == ts(300)


class TestFallback:
    """Timestamps for entries absent from the reference tree."""

    def test_reference_policy(self, three_commits):
        resolver = Resolver(three_commits, fallback="reference", clock=fixed_clock)

        resolved = resolver.resolve(entries(c="Z")).entries[0]

        assert resolved.last_modified == ts(300)

    def test_entry_fallback_overrides_policy(self, three_commits):
        entry = Entry(path="c.md", content_id="Z", fallback_timestamp=ts(42))

        resolved = Resolver(three_commits, clock=fixed_clock).resolve([entry]).entries[0]

        assert resolved.last_modified == ts(42)

    def test_absolute_path_resolves_as_untracked(self, three_commits):
        entry = Entry(path="/elsewhere/a.md", content_id="X")

        resolved = Resolver(three_commits, clock=fixed_clock).resolve([entry]).entries[0]

        assert resolved.source == ResolutionSource.UNTRACKED
        assert resolved.last_modified == NOW

    def test_unknown_policy(self, three_commits):
        with pytest.raises(ValueError, match="Unknown fallback policy"):
            Resolver(three_commits, fallback="yesterday")


class TestFailures:
    """History errors abort the whole resolution."""

    def test_unknown_reference(self, three_commits):
        with pytest.raises(ReferenceNotFound) as exc_info:
            Resolver(three_commits).resolve(entries(a="X"), reference="nope")
        assert exc_info.value.reference == "nope"

    def test_missing_snapshot_aborts(self, three_commits):
        middle = three_commits.history()[1]
        three_commits.forget(middle)

        with pytest.raises(CorruptHistory) as exc_info:
            Resolver(three_commits).resolve(entries(a="X", b="X"))
        assert exc_info.value.snapshot_id == middle

    def test_duplicate_paths_rejected(self, three_commits):
        with pytest.raises(EntryError, match="more than once"):
            Resolver(three_commits).resolve(entries(a="X") + entries(a="X"))

    def test_duplicate_path_is_a_gust_error(self, three_commits):
        """Callers that handle GustError also handle duplicate entries."""
        with pytest.raises(GustError):
            Resolver(three_commits).resolve(entries(b="X") + entries(b="Y"))


class TestHistoryWalker:
    """Direct tests of the walker."""

    def test_visits_in_reverse_ancestry_order(self, memory_store):
        for i in range(4):
            memory_store.commit({"a.md": "X"}, ts(100 * (i + 1)))
        visited = []
        original_tree_of = memory_store.tree_of

        def tracking_tree_of(snapshot_id):
            visited.append(snapshot_id)
            return original_tree_of(snapshot_id)

        memory_store.tree_of = tracking_tree_of
        pending = PendingSet()
        pending.seed(entries(a="X"), ts(400))

        walker = HistoryWalker(memory_store)
        resolved = list(walker.walk(memory_store.refs["HEAD"], pending))

        assert resolved == []
        assert visited == memory_store.history()
        assert walker.stats.snapshots_visited == 4
        assert len(pending) == 1
        assert pending.comparisons == 4

    def test_empty_pending_set_reads_nothing(self, three_commits):
        walker = HistoryWalker(three_commits)
        three_commits.tree_fetches = 0

        assert list(walker.walk(three_commits.refs["HEAD"], PendingSet())) == []
        assert three_commits.tree_fetches == 0
