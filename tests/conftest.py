"""Shared test fixtures for gitdash tests."""

from pathlib import Path

import pytest

from gitdash.backend import FakeBackend
from gitdash.dashboard import SnapshotLimits


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake_backend(tmp_path: Path) -> FakeBackend:
    """In-memory backend rooted at a real temporary directory.

    The control directory exists on disk so the tracked-pending sidecar
    can be written.
    """
    root = tmp_path / "repo"
    control_dir = root / ".git"
    control_dir.mkdir(parents=True)
    return FakeBackend(root=root, control_dir=control_dir)


@pytest.fixture
def limits() -> SnapshotLimits:
    return SnapshotLimits(commit_rows=100, history_depth=300, max_concurrency=4)
