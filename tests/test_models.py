"""
Tests for the repository state models.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from reposync.core.models import (
    BranchInfo,
    BranchKind,
    ChangeEntry,
    ChangeKind,
    CommitInfo,
    DashboardSnapshot,
    PushedStatus,
    SnapshotState,
    StashEntry,
)


def _branch(name: str, kind: BranchKind, current: bool = False) -> BranchInfo:
    prefix = "refs/heads/" if kind is BranchKind.LOCAL else "refs/remotes/"
    return BranchInfo(short_name=name, full_ref=prefix + name, kind=kind, is_current=current)


class TestBranchInfo:
    """Tests for BranchInfo ordering."""

    def test_sort_key_orders_current_local_remote_name(self):
        branches = [
            _branch("origin/alpha", BranchKind.REMOTE),
            _branch("zeta", BranchKind.LOCAL),
            _branch("beta", BranchKind.LOCAL),
            _branch("main", BranchKind.LOCAL, current=True),
            _branch("origin/main", BranchKind.REMOTE),
        ]

        ordered = [b.short_name for b in sorted(branches, key=BranchInfo.sort_key)]

        assert ordered == ["main", "beta", "zeta", "origin/alpha", "origin/main"]

    def test_frozen(self):
        branch = _branch("main", BranchKind.LOCAL)
        with pytest.raises(ValidationError):
            branch.short_name = "other"


class TestCommitInfo:
    """Tests for CommitInfo."""

    def test_short_hash_and_pushed(self):
        commit = CommitInfo(
            sha="0123456789abcdef0123456789abcdef01234567",
            full_message="Initial commit",
            author_name="Test User",
            author_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            pushed_status=PushedStatus.PUSHED,
        )
        assert commit.short_hash == "0123456"
        assert commit.is_pushed

    def test_defaults_to_unpushed(self):
        commit = CommitInfo(
            sha="f" * 40,
            full_message="x",
            author_name="a",
            author_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert commit.pushed_status is PushedStatus.UNPUSHED
        assert not commit.is_pushed


class TestStashEntry:
    """Tests for StashEntry."""

    def test_ref(self):
        assert StashEntry(index=2, message="wip", short_hash="abc1234").ref == "stash@{2}"

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            StashEntry(index=-1, message="wip", short_hash="abc1234")


class TestChangeEntry:
    """Tests for ChangeEntry."""

    def test_equality(self):
        assert ChangeEntry(path="a.txt", kind=ChangeKind.ADDED) == ChangeEntry(
            path="a.txt", kind=ChangeKind.ADDED
        )


class TestDashboardSnapshot:
    """Tests for DashboardSnapshot variants."""

    def test_ready_carries_all_counters(self):
        snapshot = DashboardSnapshot.ready("main", 2, 1, 0)
        assert snapshot.is_ready
        assert snapshot.current_branch == "main"
        assert snapshot.pending_change_count == 2
        assert snapshot.unpushed_commit_count == 1
        assert snapshot.conflict_file_count == 0
        assert snapshot.reason is None

    def test_error_carries_no_counters(self):
        snapshot = DashboardSnapshot.error("boom")
        assert snapshot.state is SnapshotState.ERROR
        assert not snapshot.is_ready
        assert snapshot.reason == "boom"
        assert snapshot.pending_change_count is None
        assert snapshot.unpushed_commit_count is None
        assert snapshot.conflict_file_count is None

    def test_not_initialized(self):
        snapshot = DashboardSnapshot.not_initialized()
        assert snapshot.state is SnapshotState.NOT_INITIALIZED
        assert snapshot.current_branch is None
