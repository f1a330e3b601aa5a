"""
Branch orchestration.

Lists local and remote-tracking branches in the order the dashboard
relies on, and runs the branch-level mutations: checkout with
local/remote disambiguation, create, delete, rename, merge and rebase.
"""

from __future__ import annotations

import logging

from git.exc import GitCommandError

from reposync.core.changes.status import read_status, refuse_unresolved_conflicts
from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.models import BranchInfo, BranchKind
from reposync.core.outcome import OperationStatus, Outcome, guarded
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "refs/heads/"
REMOTE_PREFIX = "refs/remotes/"


class BranchOrchestrator:
    """
    Branch listing and branch-level mutations for one repository.

    Example:
        >>> branches = BranchOrchestrator(handle)
        >>> [b.short_name for b in branches.list_rich()]
        ['main', 'feature', 'origin/main']
        >>> branches.checkout("feature").success
        True
    """

    def __init__(self, handle: RepositoryHandle) -> None:
        self.handle = handle

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_rich(self) -> list[BranchInfo]:
        """
        All local and remote-tracking branches.

        Sorted current branch first, then local before remote, then by
        name. Symbolic remote refs such as origin/HEAD are skipped.

        Returns:
            Sorted branches; empty if the repository cannot be read.
        """
        try:
            repo = self.handle.ensure_open()
            output = repo.git.for_each_ref(
                "--format=%(refname)%09%(symref)", "refs/heads", "refs/remotes"
            )
            current_ref = self.handle.head_ref()
        except (RepoSyncError, GitCommandError) as e:
            logger.warning("Could not list branches: %s", e)
            return []

        branches: list[BranchInfo] = []
        for line in output.splitlines():
            full_ref, _, symref = line.partition("\t")
            if not full_ref or symref:
                continue
            if full_ref.startswith(LOCAL_PREFIX):
                kind = BranchKind.LOCAL
                short_name = full_ref[len(LOCAL_PREFIX) :]
            elif full_ref.startswith(REMOTE_PREFIX):
                kind = BranchKind.REMOTE
                short_name = full_ref[len(REMOTE_PREFIX) :]
            else:
                continue
            branches.append(
                BranchInfo(
                    short_name=short_name,
                    full_ref=full_ref,
                    kind=kind,
                    is_current=full_ref == current_ref,
                )
            )

        return sorted(branches, key=BranchInfo.sort_key)

    def _remote_match(self, name: str) -> str | None:
        """
        Remote-tracking ref whose branch part is exactly ``name``.

        The configured remote wins over any other remote.
        """
        preferred = f"{REMOTE_PREFIX}{self.handle.remote_name}/{name}"
        candidates: list[str] = []
        for branch in self.list_rich():
            if branch.kind is not BranchKind.REMOTE:
                continue
            _, _, branch_part = branch.short_name.partition("/")
            if branch_part == name:
                candidates.append(branch.full_ref)
        if preferred in candidates:
            return preferred
        return candidates[0] if candidates else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @guarded("branch.checkout")
    def checkout(self, name: str, require_commit: bool = True) -> Outcome:
        """
        Switch to ``name``.

        Resolution order:
            1. an existing local branch is checked out;
            2. a remote-tracking branch with the same branch name becomes a
               new local branch tracking it;
            3. otherwise a new branch is created at HEAD.

        Args:
            name: Short branch name.
            require_commit: Fail with REPOSITORY_EMPTY while HEAD is unborn.
                When False, an unborn HEAD is repointed at ``name`` instead.
        """
        repo = self.handle.ensure_open()
        name = name.strip()
        if not name:
            raise RepoSyncError(ErrorKind.BRANCH_NOT_FOUND, "Branch name is empty")

        if self.handle.current_branch() == name:
            return Outcome.ok("branch.checkout", f"Already on {name}")

        if self.handle.head_commit() is None:
            if require_commit:
                raise RepoSyncError(
                    ErrorKind.REPOSITORY_EMPTY, "Repository is empty. Commit first."
                )
            repo.git.symbolic_ref("HEAD", f"{LOCAL_PREFIX}{name}")
            logger.info("Pointed unborn HEAD at %s", name)
            return Outcome.ok("branch.checkout", f"Switched to new branch {name}")

        if self.handle.ref_exists(f"{LOCAL_PREFIX}{name}"):
            repo.git.checkout(name)
            logger.info("Checked out %s", name)
            return Outcome.ok("branch.checkout", f"Switched to {name}")

        remote_ref = self._remote_match(name)
        if remote_ref is not None:
            tracked = remote_ref[len(REMOTE_PREFIX) :]
            repo.git.checkout("-b", name, "--track", tracked)
            logger.info("Created %s tracking %s", name, tracked)
            return Outcome.ok("branch.checkout", f"Switched to {name} tracking {tracked}")

        repo.git.checkout("-b", name)
        logger.info("Created and checked out new branch %s", name)
        return Outcome.ok("branch.checkout", f"Switched to new branch {name}")

    @guarded("branch.create")
    def create(self, name: str) -> Outcome:
        repo = self.handle.ensure_open()
        head = self.handle.require_head()
        repo.git.branch(name)
        logger.info("Created branch %s at %s", name, head[:8])
        return Outcome.ok("branch.create", f"Created branch {name}", commit_sha=head)

    @guarded("branch.delete")
    def delete(self, name: str) -> Outcome:
        """Force-delete a local branch other than the checked-out one."""
        repo = self.handle.ensure_open()
        if name == self.handle.current_branch():
            raise RepoSyncError(
                ErrorKind.CANNOT_DELETE_CURRENT, f"Cannot delete the current branch {name}"
            )
        if not self.handle.ref_exists(f"{LOCAL_PREFIX}{name}"):
            raise RepoSyncError(ErrorKind.BRANCH_NOT_FOUND, f"Branch not found: {name}")

        repo.git.branch("-D", name)
        logger.info("Deleted branch %s", name)
        return Outcome.ok("branch.delete", f"Deleted branch {name}")

    @guarded("branch.rename")
    def rename(self, new_name: str) -> Outcome:
        """Rename the checked-out branch."""
        repo = self.handle.ensure_open()
        current = self.handle.current_branch()
        if current is None:
            raise RepoSyncError(
                ErrorKind.BRANCH_NOT_FOUND, "HEAD is detached; no branch to rename"
            )
        if current == new_name:
            return Outcome.no_changes("branch.rename", f"Branch is already named {new_name}")

        repo.git.branch("-m", new_name)
        logger.info("Renamed branch %s to %s", current, new_name)
        return Outcome.ok("branch.rename", f"Renamed {current} to {new_name}")

    def _resolve_target(self, ref: str) -> str:
        sha = self.handle.resolve_commit(ref)
        if sha is None:
            raise RepoSyncError(ErrorKind.BRANCH_NOT_FOUND, f"Branch not found: {ref}")
        return sha

    @guarded("branch.merge")
    def merge(self, ref: str) -> Outcome:
        """Merge ``ref`` into HEAD."""
        self.handle.ensure_open()
        return self.integrate(ref, "branch.merge")

    @guarded("branch.rebase")
    def rebase(self, ref: str) -> Outcome:
        """
        Rebase the current branch onto ``ref``.

        Requires a working tree without tracked changes; untracked files
        are allowed.
        """
        repo = self.handle.ensure_open()
        self.handle.require_head()
        if read_status(repo).has_uncommitted_changes():
            raise RepoSyncError(
                ErrorKind.DIRTY_WORKING_TREE,
                "Commit or stash your changes before rebasing",
            )
        return self.integrate(ref, "branch.rebase", rebase=True)

    def integrate(self, ref: str, operation: str, rebase: bool = False) -> Outcome:
        """
        Merge or rebase ``ref`` into the current branch.

        The status is derived by comparing commits before and after: HEAD
        unchanged is already up to date, HEAD moved onto the target is a
        fast-forward, anything else merged or replayed commits. Unmerged
        paths left behind by a failed run are reported as a conflict.

        Raises:
            RepoSyncError: BRANCH_NOT_FOUND if ``ref`` does not resolve.
                DIRTY_WORKING_TREE if earlier conflicts are unresolved.
            GitCommandError: If the backend fails without leaving conflicts.
        """
        repo = self.handle.ensure_open()
        before = self.handle.head_commit()
        target = self._resolve_target(ref)
        verb = "Rebase onto" if rebase else "Merge of"
        refuse_unresolved_conflicts(repo, "rebasing" if rebase else "merging")
        if rebase and self.rebase_in_progress():
            raise RepoSyncError(
                ErrorKind.DIRTY_WORKING_TREE, "A rebase is already in progress; finish it first"
            )

        try:
            if rebase:
                repo.git.rebase(ref)
            else:
                repo.git.merge("--no-edit", ref)
        except GitCommandError:
            in_progress = rebase and self.rebase_in_progress()
            if in_progress or read_status(repo).conflicting:
                kind = ErrorKind.REBASE_CONFLICT if rebase else ErrorKind.MERGE_CONFLICT
                logger.warning("%s %s stopped on conflicts", verb, ref)
                return Outcome.conflict(
                    operation, kind, f"{verb} {ref} has conflicts. Resolve them to continue."
                )
            raise

        after = self.handle.require_head()
        if after == before:
            return Outcome.ok(
                operation, "Already up to date", status=OperationStatus.ALREADY_UP_TO_DATE
            )
        if after == target:
            logger.info("Fast-forwarded %s to %s", self.handle.current_branch_label(), ref)
            return Outcome.ok(
                operation,
                f"Fast-forwarded to {ref}",
                status=OperationStatus.FAST_FORWARD,
                commit_sha=after,
            )
        if rebase:
            logger.info("Rebased %s onto %s", self.handle.current_branch_label(), ref)
            return Outcome.ok(operation, f"Rebased onto {ref}", commit_sha=after)
        logger.info("Merged %s into %s", ref, self.handle.current_branch_label())
        return Outcome.ok(
            operation, f"Merged {ref}", status=OperationStatus.MERGED, commit_sha=after
        )

    def rebase_in_progress(self) -> bool:
        return (
            self.handle.git_path("rebase-merge").exists()
            or self.handle.git_path("rebase-apply").exists()
        )
