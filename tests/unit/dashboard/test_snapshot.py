from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gitdash.backend import UNHASHED_WORKDIR, FakeBackend
from gitdash.dashboard import (
    DETACHED_BRANCH,
    UNKNOWN_BRANCH,
    AheadMode,
    FileDelta,
    SnapshotLimits,
    SnapshotService,
    UntrackedEntry,
)

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

_PREFIX = ("-c", "core.quotepath=off")


class TestSnapshotScenarios:
    @pytest.mark.anyio
    async def test_single_staged_new_file(self, fake_backend: FakeBackend) -> None:
        fake_backend.set_row("a.txt", head=None, index="b1", workdir="b1")
        args = (*_PREFIX, "diff", "--cached", "--numstat", "--", "a.txt")
        fake_backend.respond(*args, stdout="3\t0\ta.txt\n")

        snapshot = await SnapshotService(fake_backend).build()

        counts = snapshot.counts
        assert (counts.staged, counts.modified, counts.untracked) == (1, 0, 0)
        assert (counts.ahead, counts.behind) == (0, 0)
        assert snapshot.details.staged == (FileDelta("a.txt", 3, 0),)

    @pytest.mark.anyio
    async def test_feature_branch_tracking_origin(
        self, fake_backend: FakeBackend
    ) -> None:
        fake_backend.branch = "feature"
        base = fake_backend.add_chain(["c1"])
        local = fake_backend.add_chain(["l1", "l2"], parent=base, start=10)
        remote = fake_backend.add_chain(["r1"], parent=base, start=5)
        assert local is not None
        assert remote is not None
        fake_backend.refs["refs/heads/feature"] = local
        fake_backend.refs["refs/remotes/origin/feature"] = remote

        snapshot = await SnapshotService(fake_backend).build()

        assert snapshot.ahead_mode is AheadMode.UPSTREAM
        assert snapshot.upstream_ref == "refs/remotes/origin/feature"
        assert (snapshot.counts.ahead, snapshot.counts.behind) == (2, 1)

    @pytest.mark.anyio
    async def test_detached_head_without_upstream(
        self, fake_backend: FakeBackend
    ) -> None:
        fake_backend.branch = None
        tip = fake_backend.add_chain(["c1", "c2", "c3", "c4", "c5"])
        assert tip is not None
        fake_backend.refs["HEAD"] = tip

        snapshot = await SnapshotService(fake_backend).build()

        assert snapshot.branch_name == DETACHED_BRANCH
        assert snapshot.ahead_mode is AheadMode.LOCAL
        assert (snapshot.counts.ahead, snapshot.counts.behind) == (5, 0)

    @pytest.mark.anyio
    async def test_ignored_untracked_file_is_hidden(
        self, fake_backend: FakeBackend
    ) -> None:
        fake_backend.set_row("secret.env", workdir=UNHASHED_WORKDIR)
        fake_backend.set_row("notes.md", workdir=UNHASHED_WORKDIR)
        fake_backend.ignored.add("secret.env")

        snapshot = await SnapshotService(fake_backend).build()

        assert snapshot.details.untracked == (UntrackedEntry("notes.md"),)
        assert snapshot.counts.untracked == 1

    @pytest.mark.anyio
    async def test_committed_tracked_path_is_pruned(
        self, fake_backend: FakeBackend
    ) -> None:
        fake_backend.set_row("x.txt", workdir=UNHASHED_WORKDIR)
        service = SnapshotService(fake_backend)
        service.tracked_store.add(["x.txt"])

        before = await service.build()
        fake_backend.set_row("x.txt", head="b1", index="b1", workdir="b1")
        after = await service.build()

        assert before.tracked_pending == ("x.txt",)
        assert after.tracked_pending == ()
        assert service.tracked_store.read() == frozenset()


class TestSnapshotShape:
    @pytest.mark.anyio
    async def test_counts_match_details(self, fake_backend: FakeBackend) -> None:
        fake_backend.set_row("a", head="b1", index="b2", workdir="b3")
        fake_backend.set_row("b", head="b1", index="b1", workdir="b2")
        fake_backend.set_row("c", workdir=UNHASHED_WORKDIR)
        fake_backend.set_row("d", head=None, index="b1", workdir="b1")

        snapshot = await SnapshotService(fake_backend).build()

        details = snapshot.details
        assert snapshot.counts.staged == len(details.staged) == 2
        assert snapshot.counts.modified == len(details.modified) == 2
        assert snapshot.counts.untracked == len(details.untracked) == 1
        assert snapshot.counts.recent == len(details.recent)

    @pytest.mark.anyio
    async def test_repository_identity(self, fake_backend: FakeBackend) -> None:
        snapshot = await SnapshotService(fake_backend).build()

        assert snapshot.repository_name == "repo"
        assert snapshot.repository_path == fake_backend.root
        assert snapshot.branch_name == "main"

    @pytest.mark.anyio
    async def test_recent_commits_are_capped(self, fake_backend: FakeBackend) -> None:
        tip = fake_backend.add_chain([f"c{i}" for i in range(10)])
        assert tip is not None
        fake_backend.refs["refs/heads/main"] = tip

        service = SnapshotService(fake_backend, limits=SnapshotLimits(commit_rows=3))
        snapshot = await service.build()

        assert [c.id for c in snapshot.details.recent] == ["c9", "c8", "c7"]
        assert snapshot.counts.recent == 3

    @pytest.mark.anyio
    async def test_pending_outside_untracked_is_dropped(
        self, fake_backend: FakeBackend
    ) -> None:
        service = SnapshotService(fake_backend)
        service.tracked_store.add(["deleted.txt"])

        snapshot = await service.build()

        assert snapshot.tracked_pending == ()

    @pytest.mark.anyio
    async def test_read_only_control_dir_does_not_fail_build(
        self, fake_backend: FakeBackend, mocker: MockerFixture
    ) -> None:
        fake_backend.set_row("keep.txt", workdir=UNHASHED_WORKDIR)
        service = SnapshotService(fake_backend)
        service.tracked_store.add(["keep.txt", "committed.txt"])
        mocker.patch(
            "gitdash.dashboard._tracked.tempfile.mkstemp",
            side_effect=PermissionError(13, "Read-only file system"),
        )

        snapshot = await service.build()

        assert snapshot.tracked_pending == ("keep.txt",)
        assert snapshot.counts.untracked == 1


class TestReadBranchName:
    def test_unavailable_backend_reports_unknown(
        self, fake_backend: FakeBackend
    ) -> None:
        fake_backend.unavailable = True

        assert SnapshotService(fake_backend).read_branch_name() == UNKNOWN_BRANCH

    def test_detached(self, fake_backend: FakeBackend) -> None:
        fake_backend.branch = None

        assert SnapshotService(fake_backend).read_branch_name() == DETACHED_BRANCH

    def test_list_branches(self, fake_backend: FakeBackend) -> None:
        fake_backend.branches = ["main", "dev"]

        result = SnapshotService(fake_backend).list_branches()

        assert result.branches == ("dev", "main")
        assert result.current == "main"
