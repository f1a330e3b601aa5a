"""
Conflict resolution.

Resolves one unmerged path at a time by taking the "ours" or "theirs"
side and staging the result.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from git.exc import GitCommandError

from reposync.core.changes.status import read_status
from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.outcome import Outcome, guarded
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)

OURS_STAGE = 2
THEIRS_STAGE = 3


class ConflictResolver:
    """
    Lists and resolves conflicting paths.

    Example:
        >>> resolver = ConflictResolver(handle)
        >>> for path in resolver.list_conflicts():
        ...     resolver.resolve_theirs(path)
    """

    def __init__(self, handle: RepositoryHandle) -> None:
        self.handle = handle

    def list_conflicts(self) -> list[str]:
        """Conflicting paths, sorted; empty if the status cannot be read."""
        try:
            repo = self.handle.ensure_open()
            return sorted(read_status(repo).conflicting)
        except (RepoSyncError, GitCommandError) as e:
            logger.warning("Could not list conflicts: %s", e)
            return []

    def read_file(self, path: str) -> str:
        """Current content of ``path`` with its conflict markers; "" if absent."""
        target = (self.handle.root / path).resolve()
        if not target.is_relative_to(self.handle.root) or not target.is_file():
            return ""
        return target.read_text(encoding="utf-8", errors="replace")

    @guarded("conflicts.resolve")
    def resolve_ours(self, path: str) -> Outcome:
        return self._resolve(path, OURS_STAGE)

    @guarded("conflicts.resolve")
    def resolve_theirs(self, path: str) -> Outcome:
        return self._resolve(path, THEIRS_STAGE)

    def _stages(self, path: str) -> set[int]:
        repo = self.handle.ensure_open()
        output = repo.git.ls_files("-u", "--", path)
        stages: set[int] = set()
        for line in output.splitlines():
            # <mode> <object> <stage>\t<path>
            meta, _, _ = line.partition("\t")
            parts = meta.split()
            if len(parts) == 3:
                stages.add(int(parts[2]))
        return stages

    def _resolve(self, path: str, stage: int) -> Outcome:
        repo = self.handle.ensure_open()
        path = _normalize(path)
        if path not in read_status(repo).conflicting:
            raise RepoSyncError(
                ErrorKind.PATH_NOT_CONFLICTING, f"{path} is not in a conflicting state"
            )

        side = "ours" if stage == OURS_STAGE else "theirs"
        if stage in self._stages(path):
            repo.git.checkout(f"--{side}", "--", path)
            repo.git.add("--", path)
            message = f"Resolved {path} using {side}"
        else:
            # The chosen side deleted the file
            repo.git.rm("--quiet", "--", path)
            message = f"Resolved {path} using {side} (deleted)"

        logger.info("%s", message)
        return Outcome.ok("conflicts.resolve", message)


def _normalize(path: str) -> str:
    return str(PurePosixPath(Path(path).as_posix()))
