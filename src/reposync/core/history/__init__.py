"""
Commit history module.

Log of HEAD classified pushed/unpushed, plus checkout, reset, revert
and cherry-pick of individual commits.
"""

from reposync.core.history.service import CommitHistoryService, parse_log

__all__ = ["CommitHistoryService", "parse_log"]
