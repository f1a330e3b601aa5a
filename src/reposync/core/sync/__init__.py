"""
Sync module.

Fetch, pull, push, remote configuration and the link & repair recovery
against the single configured remote.
"""

from reposync.core.sync.service import (
    SyncOrchestrator,
    select_default_branch,
    validate_remote_url,
)

__all__ = [
    "SyncOrchestrator",
    "select_default_branch",
    "validate_remote_url",
]
