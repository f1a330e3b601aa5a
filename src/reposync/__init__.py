"""
RepoSync - repository state and synchronization

Keeps a local working copy in step with its history, branches, stashes
and a single remote, and derives the dashboard state shown to the user.
"""

__version__ = "0.1.0"

# Re-export core types for convenience
from reposync.core.config.models import RepoSyncConfig
from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.outcome import Outcome, Severity
from reposync.core.repo.handle import RepositoryHandle

__all__ = [
    "ErrorKind",
    "Outcome",
    "RepoSyncConfig",
    "RepoSyncError",
    "RepositoryHandle",
    "Severity",
    "__version__",
]
