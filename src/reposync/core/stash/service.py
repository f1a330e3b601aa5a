"""
Stash orchestration.

Stash entries are addressed by position, newest first. Any mutation
renumbers the entries above the touched one, so callers list again
before issuing a second index-based call.
"""

from __future__ import annotations

import logging

from git.exc import GitCommandError

from reposync.core.changes.status import read_status, refuse_unresolved_conflicts
from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.models import StashEntry
from reposync.core.outcome import Outcome, guarded
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"


def parse_stash_list(output: str) -> list[StashEntry]:
    """
    Parse ``git stash list --format=%H%x1f%s``.

    Lines are newest first, so the line number is the stash index.
    """
    entries: list[StashEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        sha, _, subject = line.partition(_FIELD_SEP)
        entries.append(StashEntry(index=len(entries), message=subject, short_hash=sha[:7]))
    return entries


class StashOrchestrator:
    """
    Create, apply, drop and list stash entries.

    Example:
        >>> stash = StashOrchestrator(handle)
        >>> stash.create("wip")
        >>> stash.list()[0].message
        'On main: wip'
        >>> stash.pop()
    """

    def __init__(self, handle: RepositoryHandle) -> None:
        self.handle = handle

    def list(self) -> list[StashEntry]:
        """Entries newest first; empty when nothing is stashed or readable."""
        try:
            return self._entries()
        except (RepoSyncError, GitCommandError) as e:
            logger.warning("Could not list stash entries: %s", e)
            return []

    def _entries(self) -> list[StashEntry]:
        repo = self.handle.ensure_open()
        if self.handle.head_commit() is None:
            return []
        output = repo.git.stash("list", f"--format=%H{_FIELD_SEP}%s")
        return parse_stash_list(output)

    def _require_entry(self, index: int) -> StashEntry:
        entries = self._entries()
        if index < 0 or index >= len(entries):
            raise RepoSyncError(ErrorKind.STASH_NOT_FOUND, f"No stash entry at index {index}")
        return entries[index]

    @guarded("stash.create")
    def create(self, message: str = "") -> Outcome:
        """
        Stash every working-tree change, untracked files included.

        Returns:
            OK, or NO_CHANGES when there is nothing to stash.
        """
        repo = self.handle.ensure_open()
        self.handle.require_head()
        if read_status(repo).is_clean():
            return Outcome.no_changes("stash.create", "No local changes to save")

        args = ["push", "--include-untracked"]
        if message.strip():
            args.extend(["-m", message.strip()])
        repo.git.stash(*args)

        logger.info("Stashed changes in %s", self.handle.root)
        return Outcome.ok("stash.create", "Changes stashed")

    @guarded("stash.apply")
    def apply(self, index: int, drop: bool = False) -> Outcome:
        """
        Apply the entry at ``index``, optionally dropping it afterwards.

        The entry is only dropped after a clean apply; an apply that stops
        on conflicts keeps it and reports MERGE_CONFLICT.
        """
        repo = self.handle.ensure_open()
        entry = self._require_entry(index)
        refuse_unresolved_conflicts(repo, "applying a stash")

        try:
            repo.git.stash("apply", entry.ref)
        except GitCommandError:
            if read_status(repo).conflicting:
                logger.warning("Applying %s stopped on conflicts", entry.ref)
                return Outcome.conflict(
                    "stash.apply",
                    ErrorKind.MERGE_CONFLICT,
                    f"Applying {entry.ref} has conflicts. The entry was kept.",
                )
            raise

        if not drop:
            logger.info("Applied %s", entry.ref)
            return Outcome.ok("stash.apply", f"Applied {entry.ref}")

        repo.git.stash("drop", entry.ref)
        logger.info("Applied and dropped %s", entry.ref)
        return Outcome.ok("stash.apply", f"Applied and dropped {entry.ref}")

    def pop(self, index: int = 0) -> Outcome:
        return self.apply(index, drop=True)

    @guarded("stash.drop")
    def drop(self, index: int) -> Outcome:
        repo = self.handle.ensure_open()
        entry = self._require_entry(index)
        repo.git.stash("drop", entry.ref)
        logger.info("Dropped %s", entry.ref)
        return Outcome.ok("stash.drop", f"Dropped {entry.ref}")
