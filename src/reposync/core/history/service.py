"""
Commit history.

Lists the log of HEAD with each commit classified as pushed or unpushed,
and runs the point-in-time operations: detached checkout, reset, revert
and cherry-pick.

Pushed/unpushed uses a linear boundary test: walking the log from HEAD,
commits before the remote-tracking commit are unpushed, and that commit
and everything older are pushed. No merge-base is computed, so rewritten
history may be misclassified.
"""

from __future__ import annotations

import logging
from datetime import datetime

from git.exc import GitCommandError

from reposync.core.changes.status import read_status, refuse_unresolved_conflicts
from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.models import CommitInfo, PushedStatus
from reposync.core.outcome import Outcome, guarded
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
LOG_FORMAT = f"%H{_FIELD_SEP}%an{_FIELD_SEP}%aI{_FIELD_SEP}%B{_RECORD_SEP}"


def parse_log(output: str, boundary_sha: str | None = None) -> list[CommitInfo]:
    """
    Parse ``git log`` output written with LOG_FORMAT.

    Args:
        output: Raw log output, newest commit first.
        boundary_sha: Commit of the remote-tracking ref, if any.

    Returns:
        Commits newest first with pushed status assigned.
    """
    commits: list[CommitInfo] = []
    pushed = False
    for record in output.split(_RECORD_SEP):
        record = record.lstrip("\n")
        if not record:
            continue
        sha, author_name, author_date, message = record.split(_FIELD_SEP, 3)
        if boundary_sha is not None and sha == boundary_sha:
            pushed = True
        commits.append(
            CommitInfo(
                sha=sha,
                full_message=message.rstrip("\n"),
                author_name=author_name,
                author_date=datetime.fromisoformat(author_date),
                pushed_status=PushedStatus.PUSHED if pushed else PushedStatus.UNPUSHED,
            )
        )
    return commits


class CommitHistoryService:
    """
    Commit log and point-in-time operations for one repository.

    Example:
        >>> history = CommitHistoryService(handle)
        >>> [c.short_hash for c in history.unpushed()]
        ['3f2a9c1']
        >>> history.revert("3f2a9c1")
    """

    def __init__(self, handle: RepositoryHandle) -> None:
        self.handle = handle

    def log(self, limit: int | None = None) -> list[CommitInfo]:
        """
        Log of HEAD with pushed status.

        Args:
            limit: Maximum number of commits (newest first); None for all.

        Returns:
            Commits newest first; empty while HEAD is unborn.

        Raises:
            RepoSyncError: NOT_A_REPOSITORY if the root has no repository.
            GitCommandError: If the log cannot be read.
        """
        repo = self.handle.ensure_open()
        if self.handle.head_commit() is None:
            return []

        boundary_sha = None
        upstream = self.handle.upstream_ref()
        if upstream is not None:
            boundary_sha = self.handle.resolve_commit(upstream)
        logger.debug("Classifying log against %s (%s)", upstream, boundary_sha)

        args = [f"--format={LOG_FORMAT}"]
        if limit is not None:
            args.append(f"--max-count={limit}")
        args.append("HEAD")
        return parse_log(repo.git.log(*args), boundary_sha)

    def list(self, limit: int | None = None) -> list[CommitInfo]:
        """Log of HEAD with pushed status; empty if it cannot be read."""
        try:
            return self.log(limit)
        except (RepoSyncError, GitCommandError) as e:
            logger.warning("Could not read commit log: %s", e)
            return []

    def unpushed(self) -> list[CommitInfo]:
        """Unpushed commits of HEAD; empty when no remote is configured."""
        try:
            if not self.handle.remote_url():
                return []
        except RepoSyncError as e:
            logger.warning("Could not read remote configuration: %s", e)
            return []
        return [c for c in self.list() if not c.is_pushed]

    def _resolve(self, commit: str) -> str:
        sha = self.handle.resolve_commit(commit.strip())
        if sha is None:
            raise RepoSyncError(ErrorKind.COMMIT_NOT_FOUND, f"Commit not found: {commit}")
        return sha

    @guarded("history.checkout")
    def checkout(self, commit: str) -> Outcome:
        """Check out ``commit`` with a detached HEAD."""
        repo = self.handle.ensure_open()
        sha = self._resolve(commit)
        repo.git.checkout("--detach", sha)
        logger.info("Detached HEAD at %s", sha[:8])
        return Outcome.ok("history.checkout", f"HEAD detached at {sha[:7]}", commit_sha=sha)

    @guarded("history.reset")
    def reset(self, commit: str, hard: bool = False) -> Outcome:
        """
        Move the current branch to ``commit``.

        Args:
            commit: Target commit.
            hard: Discard working-tree changes; otherwise they are kept
                (mixed reset).
        """
        repo = self.handle.ensure_open()
        sha = self._resolve(commit)
        mode = "--hard" if hard else "--mixed"
        repo.git.reset(mode, sha)
        logger.info("Reset (%s) %s to %s", mode, self.handle.current_branch_label(), sha[:8])
        return Outcome.ok(
            "history.reset",
            f"Reset {'hard' if hard else 'mixed'} to {sha[:7]}",
            commit_sha=sha,
        )

    def _refuse_in_progress(self, marker: str, action: str) -> None:
        if self.handle.git_path(marker).exists():
            raise RepoSyncError(
                ErrorKind.DIRTY_WORKING_TREE,
                f"A {action} is already in progress; commit or abort it first",
            )

    @guarded("history.revert")
    def revert(self, commit: str) -> Outcome:
        """
        Record a new commit that undoes ``commit``.

        Reverting a change that is already undone is reported as NO_CHANGES.
        """
        repo = self.handle.ensure_open()
        sha = self._resolve(commit)
        refuse_unresolved_conflicts(repo, "reverting")
        self._refuse_in_progress("REVERT_HEAD", "revert")
        try:
            repo.git.revert("--no-edit", sha)
        except GitCommandError as e:
            if read_status(repo).conflicting:
                logger.warning("Revert of %s stopped on conflicts", sha[:8])
                return Outcome.conflict(
                    "history.revert",
                    ErrorKind.REVERT_CONFLICT,
                    f"Revert of {sha[:7]} has conflicts. Resolve them and commit.",
                )
            if "nothing to commit" in f"{e.stdout}\n{e.stderr}":
                if self.handle.git_path("REVERT_HEAD").exists():
                    repo.git.revert("--abort")
                return Outcome.no_changes("history.revert", f"{sha[:7]} is already reverted")
            raise

        head = self.handle.require_head()
        logger.info("Reverted %s as %s", sha[:8], head[:8])
        return Outcome.ok("history.revert", f"Reverted {sha[:7]}", commit_sha=head)

    @guarded("history.cherry_pick")
    def cherry_pick(self, commit: str) -> Outcome:
        """
        Apply ``commit`` on top of HEAD.

        A pick that turns out empty is abandoned and reported as NO_CHANGES.
        """
        repo = self.handle.ensure_open()
        sha = self._resolve(commit)
        refuse_unresolved_conflicts(repo, "cherry-picking")
        self._refuse_in_progress("CHERRY_PICK_HEAD", "cherry-pick")
        try:
            repo.git.cherry_pick(sha)
        except GitCommandError:
            if read_status(repo).conflicting:
                logger.warning("Cherry-pick of %s stopped on conflicts", sha[:8])
                return Outcome.conflict(
                    "history.cherry_pick",
                    ErrorKind.CHERRY_PICK_CONFLICT,
                    f"Cherry-pick of {sha[:7]} has conflicts. Resolve them and commit.",
                )
            if self.handle.git_path("CHERRY_PICK_HEAD").exists():
                repo.git.cherry_pick("--abort")
                return Outcome.no_changes(
                    "history.cherry_pick", f"{sha[:7]} is already applied"
                )
            raise

        head = self.handle.require_head()
        logger.info("Cherry-picked %s as %s", sha[:8], head[:8])
        return Outcome.ok("history.cherry_pick", f"Cherry-picked {sha[:7]}", commit_sha=head)
