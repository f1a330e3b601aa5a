"""
Data models for repository state.

Defines the value objects handed to the presentation layer: branches,
commits, stash entries, working-tree changes and the dashboard snapshot.
They are derived on every call and never persisted.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BranchKind(str, Enum):
    """Where a branch ref lives. Declaration order is the listing order."""

    LOCAL = "local"
    REMOTE = "remote"

    @property
    def sort_rank(self) -> int:
        return 0 if self is BranchKind.LOCAL else 1


class PushedStatus(str, Enum):
    """Whether a commit is known to exist on the remote."""

    PUSHED = "pushed"
    UNPUSHED = "unpushed"


class ChangeKind(str, Enum):
    """Kind of a working-tree change."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    UNTRACKED = "untracked"
    MISSING = "missing"
    CONFLICTING = "conflicting"


class SnapshotState(str, Enum):
    """Variant of a dashboard snapshot."""

    READY = "ready"
    NOT_INITIALIZED = "not_initialized"
    ERROR = "error"


class BranchInfo(BaseModel):
    """A local or remote-tracking branch."""

    model_config = ConfigDict(frozen=True)

    short_name: str = Field(description="Name without refs/heads/ or refs/remotes/")
    full_ref: str = Field(description="Full ref name, e.g. refs/heads/main")
    kind: BranchKind
    is_current: bool = False

    def sort_key(self) -> tuple[bool, int, str]:
        """Current branch first, then local before remote, then by name."""
        return (not self.is_current, self.kind.sort_rank, self.short_name)


class CommitInfo(BaseModel):
    """A commit in the log of HEAD."""

    model_config = ConfigDict(frozen=True)

    sha: str = Field(description="Full object id")
    full_message: str
    author_name: str
    author_date: datetime
    pushed_status: PushedStatus = PushedStatus.UNPUSHED

    @property
    def short_hash(self) -> str:
        return self.sha[:7]

    @property
    def is_pushed(self) -> bool:
        return self.pushed_status is PushedStatus.PUSHED


class StashEntry(BaseModel):
    """
    A stash entry addressed by position.

    The index is positional (0 = most recent). Creating, applying with drop,
    or dropping an entry renumbers the others, so a caller must list again
    before issuing another index-based call.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    message: str
    short_hash: str

    @property
    def ref(self) -> str:
        return f"stash@{{{self.index}}}"


class ChangeEntry(BaseModel):
    """A single path in the working-tree status."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: ChangeKind


class DashboardSnapshot(BaseModel):
    """
    Point-in-time summary of a repository for the dashboard.

    A READY snapshot carries every counter; NOT_INITIALIZED and ERROR carry
    none, so a partially computed snapshot cannot be represented.
    """

    model_config = ConfigDict(frozen=True)

    state: SnapshotState
    current_branch: str | None = None
    pending_change_count: int | None = Field(default=None, ge=0)
    unpushed_commit_count: int | None = Field(default=None, ge=0)
    conflict_file_count: int | None = Field(default=None, ge=0)
    reason: str | None = None

    @classmethod
    def ready(
        cls,
        current_branch: str,
        pending_change_count: int,
        unpushed_commit_count: int,
        conflict_file_count: int,
    ) -> DashboardSnapshot:
        return cls(
            state=SnapshotState.READY,
            current_branch=current_branch,
            pending_change_count=pending_change_count,
            unpushed_commit_count=unpushed_commit_count,
            conflict_file_count=conflict_file_count,
        )

    @classmethod
    def not_initialized(cls) -> DashboardSnapshot:
        return cls(state=SnapshotState.NOT_INITIALIZED)

    @classmethod
    def error(cls, reason: str) -> DashboardSnapshot:
        return cls(state=SnapshotState.ERROR, reason=reason)

    @property
    def is_ready(self) -> bool:
        return self.state is SnapshotState.READY
