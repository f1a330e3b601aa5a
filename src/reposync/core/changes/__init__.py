"""
Working-tree changes module.

Parses working-tree status and stages/commits pending changes.
"""

from reposync.core.changes.service import ChangesService
from reposync.core.changes.status import WorkingTreeStatus, parse_porcelain, read_status

__all__ = [
    "ChangesService",
    "WorkingTreeStatus",
    "parse_porcelain",
    "read_status",
]
