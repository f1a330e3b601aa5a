"""
Working-tree status parsing.

Reads ``git status --porcelain=v1 -z`` and sorts every path into the
buckets used by the dashboard counters:

    added       new in the index          (X == "A")
    changed     modified in the index     (X in "MTRC")
    removed     deleted in the index      (X == "D")
    modified    modified in the work tree (Y in "MT")
    missing     deleted in the work tree  (Y == "D")
    untracked   not tracked               ("??")
    conflicting unmerged                  (DD, AU, UD, UA, DU, AA, UU)

A path staged and then edited again sits in two buckets, as it would in
the index and the work tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from git import Repo

from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.models import ChangeEntry, ChangeKind

UNMERGED_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


@dataclass
class WorkingTreeStatus:
    """Paths of the working tree grouped by state."""

    added: set[str] = field(default_factory=set)
    changed: set[str] = field(default_factory=set)
    removed: set[str] = field(default_factory=set)
    modified: set[str] = field(default_factory=set)
    missing: set[str] = field(default_factory=set)
    untracked: set[str] = field(default_factory=set)
    conflicting: set[str] = field(default_factory=set)

    @property
    def pending_change_count(self) -> int:
        """Dashboard count of pending changes (conflicts counted separately)."""
        return (
            len(self.added)
            + len(self.modified)
            + len(self.changed)
            + len(self.untracked)
            + len(self.missing)
            + len(self.removed)
        )

    @property
    def conflict_count(self) -> int:
        return len(self.conflicting)

    def has_uncommitted_changes(self) -> bool:
        """Tracked changes staged or unstaged. Untracked files do not count."""
        return bool(
            self.added
            or self.changed
            or self.removed
            or self.modified
            or self.missing
            or self.conflicting
        )

    def is_clean(self) -> bool:
        return not self.has_uncommitted_changes() and not self.untracked

    def entries(self) -> list[ChangeEntry]:
        """
        Flatten into ChangeEntry values sorted by path.

        Index and work-tree modifications both report as MODIFIED and are
        listed once per path.
        """
        seen: set[tuple[str, ChangeKind]] = set()
        buckets: list[tuple[set[str], ChangeKind]] = [
            (self.conflicting, ChangeKind.CONFLICTING),
            (self.added, ChangeKind.ADDED),
            (self.changed, ChangeKind.MODIFIED),
            (self.modified, ChangeKind.MODIFIED),
            (self.untracked, ChangeKind.UNTRACKED),
            (self.missing, ChangeKind.MISSING),
            (self.removed, ChangeKind.DELETED),
        ]
        for paths, kind in buckets:
            for path in paths:
                seen.add((path, kind))
        return [
            ChangeEntry(path=path, kind=kind)
            for path, kind in sorted(seen, key=lambda item: (item[0], item[1].value))
        ]


def parse_porcelain(output: str) -> WorkingTreeStatus:
    """
    Parse NUL-separated porcelain v1 output.

    With -z, a rename or copy record is "XY <new>\\0<old>\\0": the path that
    follows the status is the destination, and the next field is skipped.

    Args:
        output: Raw stdout of ``git status --porcelain=v1 -z``.

    Returns:
        Grouped status.
    """
    status = WorkingTreeStatus()
    fields = output.split("\0")
    i = 0
    while i < len(fields):
        record = fields[i]
        i += 1
        if len(record) < 4:
            continue

        code = record[:2]
        path = record[3:]
        x, y = code[0], code[1]

        if x in ("R", "C"):
            i += 1

        if code in UNMERGED_CODES:
            status.conflicting.add(path)
            continue
        if code == "??":
            status.untracked.add(path)
            continue
        if code == "!!":
            continue

        if x == "A":
            status.added.add(path)
        elif x in ("M", "T", "R", "C"):
            status.changed.add(path)
        elif x == "D":
            status.removed.add(path)

        if y in ("M", "T"):
            status.modified.add(path)
        elif y == "D":
            status.missing.add(path)

    return status


def read_status(repo: Repo) -> WorkingTreeStatus:
    """Compute the working-tree status of a repository."""
    output = repo.git.status(
        "--porcelain=v1",
        "-z",
        "--untracked-files=all",
    )
    return parse_porcelain(output)


def refuse_unresolved_conflicts(repo: Repo, action: str) -> None:
    """
    Fail before ``action`` while earlier conflicts are still unresolved.

    Git refuses a merge-family command in that state without touching the
    tree, so the leftover unmerged paths must not be reported as new ones.

    Raises:
        RepoSyncError: DIRTY_WORKING_TREE if any path is unmerged.
    """
    conflicting = read_status(repo).conflicting
    if conflicting:
        raise RepoSyncError(
            ErrorKind.DIRTY_WORKING_TREE,
            f"Resolve {len(conflicting)} conflicting file(s) before {action}",
        )
