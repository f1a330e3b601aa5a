"""
Shared state for CLI commands.

The root callback stores the target directory in ``ctx.obj``; commands
build their RepositoryHandle from it with the layered configuration.
"""

import logging
from pathlib import Path

import typer

from reposync.core.config import load_config
from reposync.core.config.models import RepoSyncConfig
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)


def repo_dir(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return Path(obj.get("repo") or Path.cwd())


def get_config(ctx: typer.Context) -> RepoSyncConfig:
    return load_config(project_dir=repo_dir(ctx))


def get_handle(ctx: typer.Context) -> RepositoryHandle:
    """Handle on the repository selected by --repo (defaults to cwd)."""
    root = repo_dir(ctx)
    logger.debug("Using repository root %s", root)
    return RepositoryHandle(root, get_config(ctx))


def resolve_token(ctx: typer.Context, token: str | None) -> str:
    """An explicit --token wins over the configured one."""
    if token is not None:
        return token
    return get_config(ctx).auth.token


TOKEN_OPTION_HELP = "Access token for HTTPS remotes (default: REPOSYNC_TOKEN)"
