from gitdash.backend import CommitEntry, FakeBackend
from gitdash.dashboard import (
    DETACHED_BRANCH,
    AheadMode,
    DivergenceResolver,
    SnapshotLimits,
    count_divergence,
    find_merge_base,
    index_commits,
    to_commit_record,
)


def _diverged_backend() -> FakeBackend:
    """main is two commits ahead of origin/main and one behind."""
    backend = FakeBackend(branch="main")
    base = backend.add_chain(["c1", "c2"], start=0)
    local_tip = backend.add_chain(["l1", "l2"], parent=base, start=10)
    upstream_tip = backend.add_chain(["u1"], parent=base, start=5)
    assert local_tip is not None
    assert upstream_tip is not None
    backend.refs["refs/heads/main"] = local_tip
    backend.refs["refs/remotes/origin/main"] = upstream_tip
    return backend


# =============================================================================
# Pure helpers
# =============================================================================


class TestToCommitRecord:
    def test_message_is_trimmed(self) -> None:
        entry = CommitEntry(id="a" * 40, message="  fix bug\n\n", timestamp_seconds=1)

        assert to_commit_record(entry).message == "fix bug"

    def test_blank_message_falls_back_to_short_id(self) -> None:
        entry = CommitEntry(id="abcdef0123456789", message=" \n", timestamp_seconds=1)

        assert to_commit_record(entry).message == "abcdef0"

    def test_stats_start_at_zero(self) -> None:
        entry = CommitEntry(id="c1", message="m", timestamp_seconds=1, parents=("p",))
        record = to_commit_record(entry)

        assert (record.additions, record.deletions, record.files) == (0, 0, ())
        assert record.parents == ("p",)


class TestMergeBase:
    def test_index_commits_keeps_first_position(self) -> None:
        entries = [
            CommitEntry("a", "", 0),
            CommitEntry("b", "", 0),
            CommitEntry("a", "", 0),
        ]

        assert index_commits(entries) == {"a": 0, "b": 1}

    def test_find_merge_base_uses_local_order(self) -> None:
        local = {"l1": 0, "x": 1, "y": 2}
        upstream = {"y": 0, "x": 3}

        assert find_merge_base(local, upstream) == "x"

    def test_count_divergence(self) -> None:
        local = {"l2": 0, "l1": 1, "c2": 2}
        upstream = {"u1": 0, "c2": 1}

        assert count_divergence(local, upstream) == (2, 1)

    def test_no_shared_commit_counts_zero(self) -> None:
        assert count_divergence({"a": 0}, {"b": 0}) == (0, 0)


# =============================================================================
# Upstream resolution
# =============================================================================


class TestUpstreamCandidates:
    def test_default_candidates(self) -> None:
        resolver = DivergenceResolver(FakeBackend())

        assert resolver.upstream_candidates("main") == [
            "refs/remotes/origin/main",
            "refs/remotes/origin/HEAD",
        ]

    def test_configured_upstream_comes_first(self) -> None:
        backend = FakeBackend()
        backend.config[("branch", "feature", "remote")] = "upstream"
        backend.config[("branch", "feature", "merge")] = "refs/heads/trunk"

        resolver = DivergenceResolver(backend)

        assert resolver.upstream_candidates("feature")[0] == (
            "refs/remotes/upstream/trunk"
        )

    def test_configured_origin_duplicate_is_collapsed(self) -> None:
        backend = FakeBackend()
        backend.config[("branch", "main", "remote")] = "origin"
        backend.config[("branch", "main", "merge")] = "refs/heads/main"

        resolver = DivergenceResolver(backend)

        assert resolver.upstream_candidates("main") == [
            "refs/remotes/origin/main",
            "refs/remotes/origin/HEAD",
        ]

    def test_find_upstream_falls_back_to_origin_head(self) -> None:
        backend = FakeBackend()
        backend.add_commit("c1")
        backend.refs["refs/heads/main"] = "c1"
        backend.refs["refs/remotes/origin/HEAD"] = "c1"

        assert DivergenceResolver(backend).find_upstream("main") == (
            "refs/remotes/origin/HEAD"
        )

    def test_find_upstream_none_when_detached(self) -> None:
        backend = _diverged_backend()

        assert DivergenceResolver(backend).find_upstream(DETACHED_BRANCH) is None

    def test_find_upstream_none_when_branch_has_no_commits(self) -> None:
        backend = FakeBackend()
        backend.add_commit("u1")
        backend.refs["refs/remotes/origin/main"] = "u1"

        assert DivergenceResolver(backend).find_upstream("main") is None


# =============================================================================
# resolve
# =============================================================================


class TestResolve:
    def test_upstream_mode_counts(self) -> None:
        backend = _diverged_backend()

        result = DivergenceResolver(backend).resolve("main")

        assert result.mode is AheadMode.UPSTREAM
        assert result.upstream_ref == "refs/remotes/origin/main"
        assert (result.ahead_count, result.behind_count) == (2, 1)
        assert [c.id for c in result.ahead] == ["l2", "l1"]
        assert [c.id for c in result.behind] == ["u1"]

    def test_recent_lists_head_history(self) -> None:
        backend = _diverged_backend()

        result = DivergenceResolver(backend).resolve("main")

        assert [c.id for c in result.recent] == ["l2", "l1", "c2", "c1"]

    def test_lists_are_capped_but_counts_are_not(self) -> None:
        backend = FakeBackend()
        base = backend.add_chain(["c1"])
        tip = backend.add_chain(["l1", "l2", "l3", "l4", "l5"], parent=base, start=10)
        assert tip is not None
        assert base is not None
        backend.refs["refs/heads/main"] = tip
        backend.refs["refs/remotes/origin/main"] = base

        limits = SnapshotLimits(commit_rows=2)
        result = DivergenceResolver(backend, limits=limits).resolve("main")

        assert result.ahead_count == 5
        assert [c.id for c in result.ahead] == ["l5", "l4"]
        assert len(result.recent) == 2

    def test_unrelated_histories_count_zero(self) -> None:
        backend = FakeBackend()
        local = backend.add_chain(["l1", "l2"], start=10)
        remote = backend.add_chain(["r1"], start=5)
        assert local is not None
        assert remote is not None
        backend.refs["refs/heads/main"] = local
        backend.refs["refs/remotes/origin/main"] = remote

        result = DivergenceResolver(backend).resolve("main")

        assert result.mode is AheadMode.UPSTREAM
        assert (result.ahead_count, result.behind_count) == (0, 0)
        assert result.ahead == ()
        assert result.behind == ()

    def test_local_mode_uses_recent_history(self) -> None:
        backend = FakeBackend()
        tip = backend.add_chain(["c1", "c2", "c3"])
        assert tip is not None
        backend.refs["refs/heads/main"] = tip

        result = DivergenceResolver(backend).resolve("main")

        assert result.mode is AheadMode.LOCAL
        assert result.upstream_ref is None
        assert result.ahead_count == 3
        assert result.behind_count == 0
        assert result.ahead == result.recent
        assert result.behind == ()

    def test_detached_head_is_local_mode(self) -> None:
        backend = _diverged_backend()
        backend.branch = None
        backend.refs["HEAD"] = "c2"

        result = DivergenceResolver(backend).resolve(DETACHED_BRANCH)

        assert result.mode is AheadMode.LOCAL
        assert [c.id for c in result.ahead] == ["c2", "c1"]

    def test_unborn_branch_has_empty_history(self) -> None:
        result = DivergenceResolver(FakeBackend()).resolve("main")

        assert result.mode is AheadMode.LOCAL
        assert result.ahead_count == 0
        assert result.recent == ()
