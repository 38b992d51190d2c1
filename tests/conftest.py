"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Repo
from helpers import commit, configure, push_branch
from typer.testing import CliRunner


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a local repository with a bare remote named ``upstream``.

    The local repository has ``main`` checked out, pushed and tracking
    ``upstream/main``.

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote.git"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    # Initialize remote repo with HEAD on main
    remote_repo = Repo.init(remote_path, bare=True)
    remote_repo.git.symbolic_ref("HEAD", "refs/heads/main")

    # Initialize local repo
    local_repo = Repo.init(local_path)
    configure(local_repo)
    commit(local_repo, "Initial commit")

    # Ensure we're on main whatever the default branch name is
    local_repo.git.checkout("-B", "main")
    if "master" in local_repo.heads:
        local_repo.delete_head("master", force=True)

    local_repo.create_remote("upstream", url=str(remote_path))
    local_repo.git.push("-u", "upstream", "main")

    yield local_path, remote_path

    # Cleanup is handled by pytest's tmp_path fixture


@pytest.fixture
def local_repo(test_env: tuple[Path, Path]) -> Repo:
    """The local repository of the test environment."""
    local_path, _ = test_env
    return Repo(local_path)


@pytest.fixture
def other_clone(test_env: tuple[Path, Path], tmp_path: Path) -> Repo:
    """A second clone of the remote, for simulating changes made by others."""
    _, remote_path = test_env
    clone = Repo.clone_from(str(remote_path), str(tmp_path / "other"))
    configure(clone)
    return clone


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_pushed_branch(local_repo: Repo):
    """Factory creating a pushed, tracking branch in the local repository and returning to main."""

    def make(name: str, *messages: str) -> None:
        local_repo.git.checkout("main")
        push_branch(local_repo, name, *messages)
        local_repo.git.checkout("main")

    return make
