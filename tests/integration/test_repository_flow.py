"""End-to-end tests against real repositories and the git executable."""

from pathlib import Path

import pytest

from gitdash.backend import DulwichBackend
from gitdash.dashboard import (
    AheadMode,
    FileDelta,
    MutationDispatcher,
    SnapshotService,
    UntrackedEntry,
)
from gitdash.exceptions import CommandFailedError, ValidationError

from tests.integration.conftest import git


class TestSnapshot:
    @pytest.mark.anyio
    async def test_staged_new_file_with_stats(self, git_repo: Path) -> None:
        (git_repo / "a.txt").write_text("one\ntwo\nthree\n")
        git(git_repo, "add", "a.txt")

        with DulwichBackend(git_repo) as backend:
            snapshot = await SnapshotService(backend).build()

        assert snapshot.branch_name == "main"
        assert snapshot.details.staged == (FileDelta("a.txt", 3, 0),)
        assert snapshot.counts.modified == 0
        assert snapshot.counts.untracked == 0

    @pytest.mark.anyio
    async def test_modified_and_untracked(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# demo\nmore\n")
        (git_repo / "notes.md").write_text("todo\n")
        (git_repo / ".gitignore").write_text("*.log\n")
        (git_repo / "debug.log").write_text("noise\n")

        with DulwichBackend(git_repo) as backend:
            snapshot = await SnapshotService(backend).build()

        assert snapshot.details.modified == (FileDelta("README.md", 1, 0),)
        assert snapshot.details.untracked == (
            UntrackedEntry(".gitignore"),
            UntrackedEntry("notes.md"),
        )

    @pytest.mark.anyio
    async def test_recent_commit_stats(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# demo\nline\n")
        git(git_repo, "commit", "-am", "Extend readme")

        with DulwichBackend(git_repo) as backend:
            snapshot = await SnapshotService(backend).build()

        newest, root = snapshot.details.recent
        assert newest.message == "Extend readme"
        assert (newest.additions, newest.deletions) == (1, 0)
        assert newest.files == (FileDelta("README.md", 1, 0),)
        # Root commits are diffed against the empty tree
        assert root.additions == 1
        assert snapshot.ahead_mode is AheadMode.LOCAL
        assert snapshot.counts.ahead == 2


class TestMutations:
    @pytest.mark.anyio
    async def test_stage_commit_cycle(self, git_repo: Path) -> None:
        (git_repo / "new.txt").write_text("hello\n")
        (git_repo / "README.md").write_text("# changed\n")

        with DulwichBackend(git_repo) as backend:
            dispatcher = MutationDispatcher(backend)
            staged = await dispatcher.stage_all()
            committed = await dispatcher.commit("Add new file")

        assert staged.extras == {"added_untracked": 1}
        assert [row.path for row in staged.snapshot.details.staged] == [
            "README.md",
            "new.txt",
        ]
        assert committed.snapshot.counts.staged == 0
        assert committed.snapshot.details.recent[0].message == "Add new file"

    @pytest.mark.anyio
    async def test_unstage_all_keeps_worktree(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# changed\n")
        git(git_repo, "add", "README.md")

        with DulwichBackend(git_repo) as backend:
            result = await MutationDispatcher(backend).unstage_all()

        assert result.extras == {"changed": 1}
        assert result.snapshot.counts.staged == 0
        assert result.snapshot.counts.modified == 1

    @pytest.mark.anyio
    async def test_tracked_pending_is_staged_with_modified(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# changed\n")
        (git_repo / "keep.txt").write_text("keep\n")
        (git_repo / "scratch.txt").write_text("scratch\n")

        with DulwichBackend(git_repo) as backend:
            dispatcher = MutationDispatcher(backend)
            await dispatcher.track_path("keep.txt", track=True)
            result = await dispatcher.stage_modified_only()

        staged = [row.path for row in result.snapshot.details.staged]
        assert staged == ["README.md", "keep.txt"]
        assert result.snapshot.details.untracked == (UntrackedEntry("scratch.txt"),)
        assert result.snapshot.tracked_pending == ()
        assert (git_repo / ".git" / "gitdash.json").exists()

    @pytest.mark.anyio
    async def test_stage_path_is_not_a_glob(self, git_repo: Path) -> None:
        for name in ("f1.txt", "f2.txt", "f?.txt"):
            (git_repo / name).write_text(f"{name}\n")

        with DulwichBackend(git_repo) as backend:
            result = await MutationDispatcher(backend).stage_path("f?.txt", stage=True)

        assert [row.path for row in result.snapshot.details.staged] == ["f?.txt"]
        assert [entry.path for entry in result.snapshot.details.untracked] == [
            "f1.txt",
            "f2.txt",
        ]

    @pytest.mark.anyio
    async def test_checkout_option_like_branch_keeps_edits(
        self, git_repo: Path
    ) -> None:
        (git_repo / "README.md").write_text("unsaved edit\n")

        with DulwichBackend(git_repo) as backend:
            with pytest.raises(ValidationError):
                await MutationDispatcher(backend).checkout("-f")

        assert (git_repo / "README.md").read_text() == "unsaved edit\n"

    @pytest.mark.anyio
    async def test_checkout_new_branch(self, git_repo: Path) -> None:
        with DulwichBackend(git_repo) as backend:
            dispatcher = MutationDispatcher(backend)
            result = await dispatcher.checkout("feature", create=True)
            branches = await dispatcher.list_branches()

        assert result.snapshot.branch_name == "feature"
        assert branches.branches == ("feature", "main")
        assert branches.current == "feature"

    @pytest.mark.anyio
    async def test_checkout_unknown_branch_fails(self, git_repo: Path) -> None:
        with DulwichBackend(git_repo) as backend:
            with pytest.raises(CommandFailedError):
                await MutationDispatcher(backend).checkout("does-not-exist")


class TestUpstream:
    @pytest.mark.anyio
    async def test_push_sets_missing_upstream(
        self, git_repo: Path, origin: Path
    ) -> None:
        with DulwichBackend(git_repo) as backend:
            result = await MutationDispatcher(backend).push()

        assert result.extras == {"upstream_fallback": True}
        snapshot = result.snapshot
        assert snapshot.ahead_mode is AheadMode.UPSTREAM
        assert snapshot.upstream_ref == "refs/remotes/origin/main"
        assert (snapshot.counts.ahead, snapshot.counts.behind) == (0, 0)

    @pytest.mark.anyio
    async def test_ahead_and_behind(self, git_repo: Path, origin: Path) -> None:
        git(git_repo, "push", "--set-upstream", "origin", "main")
        (git_repo / "local.txt").write_text("l\n")
        git(git_repo, "add", "local.txt")
        git(git_repo, "commit", "-m", "Local change")

        other = git_repo.parent / "other"
        git(git_repo.parent, "clone", str(origin), str(other))
        git(other, "config", "user.email", "other@example.com")
        git(other, "config", "user.name", "Other")
        (other / "remote.txt").write_text("r\n")
        git(other, "add", "remote.txt")
        git(other, "commit", "-m", "Remote change")
        git(other, "push", "origin", "main")
        git(git_repo, "fetch", "origin")

        with DulwichBackend(git_repo) as backend:
            snapshot = await SnapshotService(backend).build()

        assert snapshot.ahead_mode is AheadMode.UPSTREAM
        assert (snapshot.counts.ahead, snapshot.counts.behind) == (1, 1)
        assert snapshot.details.ahead[0].message == "Local change"
        assert snapshot.details.behind[0].message == "Remote change"
