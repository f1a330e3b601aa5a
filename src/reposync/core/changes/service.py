"""
Working-tree changes: listing, staging and committing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from git.exc import GitCommandError

from reposync.core.changes.status import WorkingTreeStatus, read_status
from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.models import ChangeEntry, ChangeKind
from reposync.core.outcome import Outcome, guarded
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)

_REMOVAL_KINDS = frozenset({ChangeKind.DELETED, ChangeKind.MISSING})


class ChangesService:
    """
    Lists pending changes, stages them and records commits.

    Example:
        >>> changes = ChangesService(handle)
        >>> changes.stage(changes.list_changes())
        >>> changes.commit("Fix typo")
    """

    def __init__(self, handle: RepositoryHandle) -> None:
        self.handle = handle

    def status(self) -> WorkingTreeStatus:
        """
        Current working-tree status.

        Raises:
            RepoSyncError: NOT_A_REPOSITORY when the root has no repository.
            GitCommandError: If git status fails.
        """
        repo = self.handle.ensure_open()
        return read_status(repo)

    def list_changes(self) -> list[ChangeEntry]:
        """Pending changes sorted by path; empty when nothing can be read."""
        try:
            return self.status().entries()
        except (RepoSyncError, GitCommandError) as e:
            logger.warning("Could not read working-tree status: %s", e)
            return []

    @guarded("changes.stage")
    def stage(self, entries: Iterable[ChangeEntry]) -> Outcome:
        """
        Stage the given entries.

        Deleted and missing paths are removed from the index, everything
        else is added.
        """
        repo = self.handle.ensure_open()
        additions: list[str] = []
        removals: list[str] = []
        for entry in entries:
            if entry.kind in _REMOVAL_KINDS:
                removals.append(entry.path)
            else:
                additions.append(entry.path)

        if not additions and not removals:
            return Outcome.no_changes("changes.stage", "Nothing to stage")

        if additions:
            repo.git.add("--", *additions)
        if removals:
            repo.git.rm("--cached", "--ignore-unmatch", "--quiet", "--", *removals)

        count = len(additions) + len(removals)
        logger.info("Staged %d path(s) in %s", count, self.handle.root)
        return Outcome.ok("changes.stage", f"Staged {count} file(s)")

    @guarded("changes.stage")
    def stage_all(self) -> Outcome:
        repo = self.handle.ensure_open()
        repo.git.add("-A")
        return Outcome.ok("changes.stage", "Staged all changes")

    @guarded("changes.commit")
    def commit(self, message: str, amend: bool = False) -> Outcome:
        """
        Commit the index.

        Args:
            message: Commit message; must not be blank.
            amend: Replace the tip commit instead of adding a new one.

        Returns:
            OK with the new commit id, or NO_CHANGES when nothing is staged.
        """
        if not message.strip():
            raise RepoSyncError(ErrorKind.BACKEND_FAILURE, "Commit message is empty")

        repo = self.handle.ensure_open()
        if amend:
            self.handle.require_head()
        else:
            status = read_status(repo)
            if status.conflicting:
                raise RepoSyncError(
                    ErrorKind.BACKEND_FAILURE,
                    f"Resolve {len(status.conflicting)} conflicting file(s) before committing",
                )
            if not (status.added or status.changed or status.removed):
                return Outcome.no_changes("changes.commit", "Nothing staged to commit")

        args = ["-m", message]
        if amend:
            args.append("--amend")
        repo.git.commit(*args)

        sha = self.handle.require_head()
        logger.info("Committed %s in %s", sha[:8], self.handle.root)
        return Outcome.ok(
            "changes.commit",
            "Commit amended!" if amend else "Committed!",
            commit_sha=sha,
        )

    def last_commit_message(self) -> str:
        """Full message of HEAD, or "" while HEAD is unborn."""
        try:
            if self.handle.head_commit() is None:
                return ""
            repo = self.handle.ensure_open()
            return repo.git.log("-1", "--format=%B").strip()
        except (RepoSyncError, GitCommandError) as e:
            logger.warning("Could not read last commit message: %s", e)
            return ""
