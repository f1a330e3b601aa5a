"""
Error taxonomy for repository operations.

Every failure an orchestrator can report is one of the ErrorKind values
below. Backend exceptions are classified into a kind at the boundary so
that callers only ever branch on the kind, never on message text.
"""

from __future__ import annotations

import logging
from enum import Enum

from git.exc import GitCommandError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Kinds of failure reported by repository operations."""

    NOT_A_REPOSITORY = "not_a_repository"
    REPOSITORY_EMPTY = "repository_empty"
    COMMIT_NOT_FOUND = "commit_not_found"
    BRANCH_NOT_FOUND = "branch_not_found"
    STASH_NOT_FOUND = "stash_not_found"
    CANNOT_DELETE_CURRENT = "cannot_delete_current"
    DIRTY_WORKING_TREE = "dirty_working_tree"
    NO_REMOTE = "no_remote"
    NO_DEFAULT_REMOTE_BRANCH = "no_default_remote_branch"
    INVALID_REMOTE_URL = "invalid_remote_url"
    PATH_NOT_CONFLICTING = "path_not_conflicting"
    MERGE_CONFLICT = "merge_conflict"
    REBASE_CONFLICT = "rebase_conflict"
    CHERRY_PICK_CONFLICT = "cherry_pick_conflict"
    REVERT_CONFLICT = "revert_conflict"
    NETWORK_FAILURE = "network_failure"
    AUTH_FAILURE = "auth_failure"
    BACKEND_FAILURE = "backend_failure"

    @property
    def is_conflict(self) -> bool:
        """Conflict kinds leave the working tree in a resolvable state."""
        return self in CONFLICT_KINDS


CONFLICT_KINDS = frozenset(
    {
        ErrorKind.MERGE_CONFLICT,
        ErrorKind.REBASE_CONFLICT,
        ErrorKind.CHERRY_PICK_CONFLICT,
        ErrorKind.REVERT_CONFLICT,
    }
)


class RepoSyncError(Exception):
    """
    Raised inside an operation to abort it with a classified failure.

    Public orchestrator methods never let this escape; it is converted
    into a failed Outcome by the ``guarded`` decorator.
    """

    def __init__(self, kind: ErrorKind, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.kind = kind
        self.stderr = stderr


# Lower-cased stderr fragments emitted by git and its HTTP transport.
_AUTH_MARKERS = (
    "authentication failed",
    "could not read username",
    "could not read password",
    "invalid username or password",
    "terminal prompts disabled",
    "the requested url returned error: 401",
    "the requested url returned error: 403",
    "permission denied",
    "access denied",
)

_NETWORK_MARKERS = (
    "could not resolve host",
    "failed to connect",
    "connection timed out",
    "connection refused",
    "network is unreachable",
    "operation timed out",
    "timeout:",
    "did not complete in",
    "early eof",
    "the remote end hung up unexpectedly",
    "ssl certificate problem",
    "unable to access",
    "could not read from remote repository",
)


def _stderr_of(exc: GitCommandError) -> str:
    stderr = exc.stderr
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    return str(stderr or "")


def classify_git_error(exc: GitCommandError) -> ErrorKind:
    """
    Classify a failed git invocation into an ErrorKind.

    Credential rejection is checked before transport failure because git
    reports an HTTP 401/403 as "unable to access" as well.

    Args:
        exc: The exception raised by GitPython.

    Returns:
        AUTH_FAILURE, NETWORK_FAILURE or BACKEND_FAILURE.
    """
    text = f"{_stderr_of(exc)}\n{exc}".lower()
    if any(marker in text for marker in _AUTH_MARKERS):
        return ErrorKind.AUTH_FAILURE
    if any(marker in text for marker in _NETWORK_MARKERS):
        return ErrorKind.NETWORK_FAILURE
    return ErrorKind.BACKEND_FAILURE


def describe_git_error(exc: GitCommandError) -> str:
    """Short human-readable description of a failed git invocation."""
    stderr = _stderr_of(exc).strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:") :].strip()
    if len(stderr) >= 2 and stderr[0] == stderr[-1] == "'":
        stderr = stderr[1:-1]
    lines = [line.strip() for line in stderr.splitlines() if line.strip()]
    # git prefixes the interesting line with "fatal:" or "error:"
    for line in lines:
        lowered = line.lower()
        if lowered.startswith(("fatal:", "error:")):
            return line.split(":", 1)[1].strip()
    if lines:
        return lines[-1]
    return f"git exited with status {exc.status}"
