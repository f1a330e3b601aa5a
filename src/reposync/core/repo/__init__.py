"""
Repository lifecycle.

Provides the caller-owned handle on one working copy and the transport
environment used for authenticated remote operations.

Example:
    >>> from reposync.core.repo import RepositoryHandle
    >>> with RepositoryHandle(project_dir) as handle:
    ...     handle.initialize()
"""

from reposync.core.repo.auth import basic_auth_header, transport_env
from reposync.core.repo.handle import RepositoryHandle

__all__ = [
    "RepositoryHandle",
    "basic_auth_header",
    "transport_env",
]
