"""
Structured result of a repository operation.

Orchestrators return an Outcome instead of a bare message so that callers
can choose how to present it (severity, conflict routing) from explicit
fields rather than by inspecting the message text.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from git.exc import GitCommandError
from pydantic import BaseModel, ConfigDict, Field

from reposync.core.errors import (
    ErrorKind,
    RepoSyncError,
    classify_git_error,
    describe_git_error,
)

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Severity class used for transient display of an outcome."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class OperationStatus(str, Enum):
    """What the backend actually did."""

    OK = "ok"
    NO_CHANGES = "no_changes"
    ALREADY_UP_TO_DATE = "already_up_to_date"
    FAST_FORWARD = "fast_forward"
    MERGED = "merged"
    CONFLICTS = "conflicts"
    FAILED = "failed"


class Outcome(BaseModel):
    """
    Result of a single orchestrator operation.

    Example:
        >>> outcome = Outcome.ok("branch.create", "Created branch feature")
        >>> outcome.success
        True
    """

    model_config = ConfigDict(frozen=True)

    operation: str = Field(description="Operation that produced this outcome")
    severity: Severity = Field(description="Display severity")
    message: str = Field(default="", description="Short human-readable status")
    status: OperationStatus = Field(default=OperationStatus.OK)
    error_kind: ErrorKind | None = Field(
        default=None,
        description="Failure kind; set for errors and conflicts",
    )
    commit_sha: str | None = Field(
        default=None,
        description="Commit produced or targeted by the operation, if any",
    )

    @property
    def success(self) -> bool:
        """True unless the operation failed outright."""
        return self.severity != Severity.ERROR

    @property
    def has_conflicts(self) -> bool:
        """True when the caller should route the user to conflict resolution."""
        return self.error_kind is not None and self.error_kind.is_conflict

    @classmethod
    def ok(
        cls,
        operation: str,
        message: str,
        status: OperationStatus = OperationStatus.OK,
        commit_sha: str | None = None,
    ) -> Outcome:
        return cls(
            operation=operation,
            severity=Severity.SUCCESS,
            message=message,
            status=status,
            commit_sha=commit_sha,
        )

    @classmethod
    def no_changes(cls, operation: str, message: str) -> Outcome:
        """Nothing to do; distinguishable from both success and failure."""
        return cls(
            operation=operation,
            severity=Severity.WARNING,
            message=message,
            status=OperationStatus.NO_CHANGES,
        )

    @classmethod
    def conflict(cls, operation: str, kind: ErrorKind, message: str) -> Outcome:
        return cls(
            operation=operation,
            severity=Severity.WARNING,
            message=message,
            status=OperationStatus.CONFLICTS,
            error_kind=kind,
        )

    @classmethod
    def failure(cls, operation: str, kind: ErrorKind, message: str) -> Outcome:
        return cls(
            operation=operation,
            severity=Severity.ERROR,
            message=message,
            status=OperationStatus.FAILED,
            error_kind=kind,
        )

    def summary(self) -> str:
        """Generate a one-line summary of the outcome."""
        if self.error_kind is not None and not self.success:
            return f"{self.operation} failed ({self.error_kind.value}): {self.message}"
        return f"{self.operation}: {self.message}"


F = TypeVar("F", bound=Callable[..., Outcome])


def guarded(operation: str) -> Callable[[F], F]:
    """
    Recover locally from backend failures inside an operation.

    Wraps a method returning an Outcome. RepoSyncError is turned into a
    failure carrying its kind; GitCommandError is classified first. Any
    other exception is a programming error and propagates.

    Args:
        operation: Operation name recorded on the failure Outcome.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Outcome:
            try:
                return func(*args, **kwargs)
            except RepoSyncError as e:
                logger.warning("%s failed (%s): %s", operation, e.kind.value, e)
                return Outcome.failure(operation, e.kind, str(e))
            except GitCommandError as e:
                kind = classify_git_error(e)
                message = describe_git_error(e)
                logger.error("%s failed (%s): %s", operation, kind.value, message)
                return Outcome.failure(operation, kind, message)

        return wrapper  # type: ignore[return-value]

    return decorator
