"""
Configuration data models for reposync.

These models define the structure of .reposync.json and
~/.config/reposync/config.json files, with validation via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class RemoteConfig(BaseModel):
    """
    The single remote the orchestrators synchronize with.
    """
    name: str = Field(
        default="origin",
        min_length=1,
        description="Name of the remote used for fetch, pull, push and repair"
    )
    network_timeout: int = Field(
        default=120,
        ge=1,
        description="Seconds of stalled transfer before a fetch/pull/push/clone is aborted and reported as a network failure"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Remote names become part of ref names and may not contain slashes."""
        if "/" in v or v.strip() != v:
            raise ValueError(f"Invalid remote name: {v!r}")
        return v


class SyncConfig(BaseModel):
    """
    How pull integrates fetched history.
    """
    pull_rebase: bool = Field(
        default=False,
        description="Rebase the current branch onto its upstream instead of merging"
    )


class RepositoryConfig(BaseModel):
    """
    Settings used when a repository is created.
    """
    default_branch: Optional[str] = Field(
        default=None,
        description="Initial branch for new repositories (None uses git's default)"
    )


class IdentityConfig(BaseModel):
    """
    Author identity written to the repository config.

    Empty values are never written, so an existing identity is kept.
    """
    name: str = Field(default="", description="user.name")
    email: str = Field(default="", description="user.email")


class AuthConfig(BaseModel):
    """
    Credentials for HTTPS remotes.
    """
    token: str = Field(
        default="",
        repr=False,
        description="Access token; empty means anonymous access"
    )


class RepoSyncConfig(BaseModel):
    """
    Top-level reposync configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = RepoSyncConfig(remote=RemoteConfig(name="upstream"))
        >>> config.remote.name
        'upstream'
    """
    remote: RemoteConfig = Field(
        default_factory=RemoteConfig,
        description="Remote settings"
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Pull behaviour"
    )
    repository: RepositoryConfig = Field(
        default_factory=RepositoryConfig,
        description="Repository creation settings"
    )
    identity: IdentityConfig = Field(
        default_factory=IdentityConfig,
        description="Author identity"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig,
        description="Remote credentials"
    )
