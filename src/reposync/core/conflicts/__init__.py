"""
Conflict resolution module.

Lists conflicting files and resolves them by choosing a side.
"""

from reposync.core.conflicts.resolver import ConflictResolver

__all__ = ["ConflictResolver"]
