"""
Dashboard snapshot aggregation.

Composes working-tree status, the current branch and the unpushed commit
count into one DashboardSnapshot. The snapshot is all-or-nothing: any
failure while computing it yields an ERROR snapshot, never a partially
filled one.
"""

from __future__ import annotations

import logging

from git.exc import GitCommandError

from reposync.core.changes.status import read_status
from reposync.core.errors import ErrorKind, RepoSyncError, describe_git_error
from reposync.core.history.service import CommitHistoryService
from reposync.core.models import DashboardSnapshot
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)


class StatusAggregator:
    """
    Computes the dashboard snapshot on demand.

    Nothing is cached: call ``snapshot()`` again after every mutating
    operation.

    Example:
        >>> snapshot = StatusAggregator(handle).snapshot()
        >>> if snapshot.is_ready:
        ...     print(snapshot.current_branch, snapshot.pending_change_count)
    """

    def __init__(self, handle: RepositoryHandle) -> None:
        self.handle = handle
        self.history = CommitHistoryService(handle)

    def snapshot(self) -> DashboardSnapshot:
        if not self.handle.is_repository():
            return DashboardSnapshot.not_initialized()

        try:
            return self._compute()
        except RepoSyncError as e:
            if e.kind is ErrorKind.NOT_A_REPOSITORY:
                return DashboardSnapshot.not_initialized()
            logger.warning("Snapshot of %s failed: %s", self.handle.root, e)
            return DashboardSnapshot.error(str(e))
        except GitCommandError as e:
            reason = describe_git_error(e)
            logger.warning("Snapshot of %s failed: %s", self.handle.root, reason)
            return DashboardSnapshot.error(reason)

    def _compute(self) -> DashboardSnapshot:
        repo = self.handle.ensure_open()
        status = read_status(repo)
        branch = self.handle.current_branch_label()

        # Unpushed commits only count once a remote is configured
        unpushed = 0
        if self.handle.remote_url():
            unpushed = sum(1 for commit in self.history.log() if not commit.is_pushed)

        return DashboardSnapshot.ready(
            current_branch=branch,
            pending_change_count=status.pending_change_count,
            unpushed_commit_count=unpushed,
            conflict_file_count=status.conflict_count,
        )
