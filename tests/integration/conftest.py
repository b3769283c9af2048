import shutil
import subprocess
from pathlib import Path

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


def git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        check=True,
        text=True,
    )
    return result.stdout


def init_git_repo(path: Path) -> None:
    """Initialize a repository on ``main`` with a committer identity."""
    path.mkdir(parents=True, exist_ok=True)
    git(path, "-c", "init.defaultBranch=main", "init")
    git(path, "config", "user.email", "test@example.com")
    git(path, "config", "user.name", "Test User")
    git(path, "config", "commit.gpgsign", "false")
    git(path, "config", "push.autoSetupRemote", "false")


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A repository with one committed file, ``README.md``."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    root = tmp_path / "work"
    init_git_repo(root)
    (root / "README.md").write_text("# demo\n")
    git(root, "add", "README.md")
    git(root, "commit", "-m", "Initial commit")
    return root.resolve()


@pytest.fixture
def origin(git_repo: Path, tmp_path: Path) -> Path:
    """A bare remote registered as ``origin`` with nothing pushed yet."""
    remote = tmp_path / "origin.git"
    git(tmp_path, "-c", "init.defaultBranch=main", "init", "--bare", str(remote))
    git(git_repo, "remote", "add", "origin", str(remote))
    return remote
