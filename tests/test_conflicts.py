"""
Tests for ConflictResolver.

Conflicts are produced with real merges between two branches that edit
the same file.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from reposync.core.conflicts import ConflictResolver
from reposync.core.errors import ErrorKind
from reposync.core.repo.handle import RepositoryHandle


@pytest.fixture
def conflicted(handle: RepositoryHandle, commit_file, git) -> Callable[..., RepositoryHandle]:
    """Merge a branch into main so that README.md conflicts."""

    def _conflict(theirs: str | None = "theirs\n", ours: str | None = "ours\n") -> RepositoryHandle:
        root = handle.root
        git(root, "checkout", "-b", "other")
        if theirs is None:
            git(root, "rm", "--quiet", "README.md")
            git(root, "commit", "-m", "Remove README")
        else:
            commit_file(root, "README.md", theirs)
        git(root, "checkout", "main")
        if ours is None:
            git(root, "rm", "--quiet", "README.md")
            git(root, "commit", "-m", "Remove README")
        else:
            commit_file(root, "README.md", ours)
        handle.ensure_open().git.merge("other", with_exceptions=False)
        return handle

    return _conflict


class TestListConflicts:
    """Tests for list_conflicts."""

    def test_none(self, handle: RepositoryHandle) -> None:
        assert ConflictResolver(handle).list_conflicts() == []

    def test_after_merge(self, conflicted) -> None:
        handle = conflicted()
        assert ConflictResolver(handle).list_conflicts() == ["README.md"]

    def test_not_a_repository(self, tmp_path: Path) -> None:
        assert ConflictResolver(RepositoryHandle(tmp_path)).list_conflicts() == []


class TestReadFile:
    """Tests for read_file."""

    def test_includes_markers(self, conflicted) -> None:
        handle = conflicted()

        content = ConflictResolver(handle).read_file("README.md")

        assert "<<<<<<<" in content
        assert "ours" in content
        assert "theirs" in content

    def test_missing_file(self, handle: RepositoryHandle) -> None:
        assert ConflictResolver(handle).read_file("nope.txt") == ""

    def test_outside_root(self, handle: RepositoryHandle) -> None:
        (handle.root.parent / "secret.txt").write_text("secret\n")
        assert ConflictResolver(handle).read_file("../secret.txt") == ""


class TestResolve:
    """Tests for resolve_ours / resolve_theirs."""

    def test_ours(self, conflicted) -> None:
        handle = conflicted()
        resolver = ConflictResolver(handle)

        outcome = resolver.resolve_ours("README.md")

        assert outcome.success
        assert (handle.root / "README.md").read_text() == "ours\n"
        assert resolver.list_conflicts() == []

    def test_theirs(self, conflicted, git) -> None:
        handle = conflicted()
        resolver = ConflictResolver(handle)

        outcome = resolver.resolve_theirs("README.md")

        assert outcome.success
        assert (handle.root / "README.md").read_text() == "theirs\n"
        assert resolver.list_conflicts() == []
        assert "README.md" in git(handle.root, "diff", "--cached", "--name-only")

    def test_theirs_deleted(self, conflicted) -> None:
        handle = conflicted(theirs=None)
        resolver = ConflictResolver(handle)

        outcome = resolver.resolve_theirs("README.md")

        assert outcome.success
        assert "deleted" in outcome.message
        assert not (handle.root / "README.md").exists()
        assert resolver.list_conflicts() == []

    def test_ours_kept_when_theirs_deleted(self, conflicted) -> None:
        handle = conflicted(theirs=None)

        outcome = ConflictResolver(handle).resolve_ours("README.md")

        assert outcome.success
        assert (handle.root / "README.md").read_text() == "ours\n"

    def test_resolution_can_be_committed(self, conflicted, git) -> None:
        handle = conflicted()
        ConflictResolver(handle).resolve_theirs("README.md")

        git(handle.root, "commit", "--no-edit")

        assert git(handle.root, "status", "--porcelain") == ""

    def test_path_not_conflicting(self, conflicted) -> None:
        handle = conflicted()
        (handle.root / "clean.txt").write_text("x\n")

        outcome = ConflictResolver(handle).resolve_ours("clean.txt")

        assert outcome.error_kind is ErrorKind.PATH_NOT_CONFLICTING

    def test_no_merge_in_progress(self, handle: RepositoryHandle) -> None:
        outcome = ConflictResolver(handle).resolve_theirs("README.md")
        assert outcome.error_kind is ErrorKind.PATH_NOT_CONFLICTING

    def test_resolving_twice(self, conflicted) -> None:
        handle = conflicted()
        resolver = ConflictResolver(handle)
        resolver.resolve_ours("README.md")

        outcome = resolver.resolve_ours("README.md")

        assert outcome.error_kind is ErrorKind.PATH_NOT_CONFLICTING
