"""
Pytest configuration and shared fixtures.

Provides throw-away git repositories (plain, with commits, and linked to a
bare repository acting as the remote) and isolates every test from the
user's git and reposync configuration.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from reposync.core.config import clear_cache
from reposync.core.repo.handle import RepositoryHandle

GitRunner = Callable[..., str]


def run_git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` and return stripped stdout."""
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


# ==============================================================================
# Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch) -> Iterator[None]:
    """
    Point git and reposync at empty per-test configuration.

    The global git config only carries an identity and the default branch
    name so that repositories behave the same on every machine.
    """
    home = tmp_path_factory.mktemp("home")
    gitconfig = home / "gitconfig"
    gitconfig.write_text(
        "[user]\n"
        "\tname = Test User\n"
        "\temail = test@example.com\n"
        "[init]\n"
        "\tdefaultBranch = main\n"
        "[commit]\n"
        "\tgpgsign = false\n"
    )
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / "xdg"))
    for key in (
        "REPOSYNC_REMOTE",
        "REPOSYNC_NETWORK_TIMEOUT",
        "REPOSYNC_PULL_REBASE",
        "REPOSYNC_DEFAULT_BRANCH",
        "REPOSYNC_USER_NAME",
        "REPOSYNC_USER_EMAIL",
        "REPOSYNC_TOKEN",
        "GIT_CONFIG_COUNT",
    ):
        monkeypatch.delenv(key, raising=False)

    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Repository Fixtures
# ==============================================================================


@pytest.fixture
def git() -> GitRunner:
    """Run git commands directly, bypassing reposync."""
    return run_git


@pytest.fixture
def commit_file() -> Callable[..., str]:
    """Write a file, commit it, and return the new commit id."""

    def _commit(repo: Path, name: str, content: str, message: str | None = None) -> str:
        path = repo / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        run_git(repo, "add", "--", name)
        run_git(repo, "commit", "-m", message or f"Update {name}")
        return run_git(repo, "rev-parse", "HEAD")

    return _commit


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository without commits."""
    repo = tmp_path / "repo"
    repo.mkdir()

    run_git(repo, "init", "-b", "main")
    run_git(repo, "config", "user.email", "test@example.com")
    run_git(repo, "config", "user.name", "Test User")

    return repo


@pytest.fixture
def git_repo_with_commit(git_repo: Path) -> Path:
    """Create a git repo with an initial commit."""
    (git_repo / "README.md").write_text("# Test Repo\n")
    run_git(git_repo, "add", "README.md")
    run_git(git_repo, "commit", "-m", "Initial commit")
    return git_repo


@pytest.fixture
def unresolved_merge(commit_file) -> Callable[[Path], None]:
    """Leave README.md unmerged on main by merging a diverged branch."""

    def _merge(repo: Path) -> None:
        run_git(repo, "checkout", "-b", "conflicting")
        commit_file(repo, "README.md", "conflicting\n")
        run_git(repo, "checkout", "main")
        commit_file(repo, "README.md", "main\n")
        subprocess.run(
            ["git", "merge", "conflicting"], cwd=repo, capture_output=True, check=False
        )
        assert "UU README.md" in run_git(repo, "status", "--porcelain")

    return _merge


@pytest.fixture
def remote_repo(tmp_path: Path) -> Path:
    """Create a bare repository acting as the remote."""
    remote = tmp_path / "remote.git"
    run_git(tmp_path, "init", "--bare", "-b", "main", str(remote))
    return remote


@pytest.fixture
def linked_repo(git_repo_with_commit: Path, remote_repo: Path) -> tuple[Path, Path]:
    """
    Local repository whose main branch is pushed to a bare remote.

    The remote is added by path, so it bypasses the http(s) check that
    ``SyncOrchestrator.add_remote`` applies.

    Returns:
        Tuple of (local_repo_path, remote_repo_path).
    """
    local = git_repo_with_commit
    run_git(local, "remote", "add", "origin", str(remote_repo))
    run_git(local, "push", "-u", "origin", "main")
    return local, remote_repo


@pytest.fixture
def clone_of(tmp_path: Path) -> Callable[[Path, str], Path]:
    """Clone a remote into a second working copy with its own identity."""

    def _clone(remote: Path, name: str = "other") -> Path:
        dest = tmp_path / name
        run_git(tmp_path, "clone", str(remote), str(dest))
        run_git(dest, "config", "user.email", "other@example.com")
        run_git(dest, "config", "user.name", "Other User")
        return dest

    return _clone


@pytest.fixture
def handle(git_repo_with_commit: Path) -> Iterator[RepositoryHandle]:
    """Handle on a repository with one commit."""
    with RepositoryHandle(git_repo_with_commit) as h:
        yield h


@pytest.fixture
def linked_handle(linked_repo: tuple[Path, Path]) -> Iterator[RepositoryHandle]:
    """Handle on a repository linked to a bare remote."""
    with RepositoryHandle(linked_repo[0]) as h:
        yield h
