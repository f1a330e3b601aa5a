"""
Branch orchestration module.

Lists local and remote-tracking branches and runs checkout, create,
delete, rename, merge and rebase against the current repository.
"""

from reposync.core.branches.service import BranchOrchestrator

__all__ = ["BranchOrchestrator"]
