"""
reposync init, identity and clone commands.
"""

from pathlib import Path

import typer
from rich.console import Console

from reposync.cli.context import TOKEN_OPTION_HELP, get_config, get_handle, resolve_token
from reposync.cli.errors import ExitCode, finish, print_not_git_repo_error
from reposync.core.repo.handle import RepositoryHandle

console = Console()


def main(ctx: typer.Context) -> None:
    """
    Create a repository in the target directory.

    An existing repository is left unchanged.
    """
    with get_handle(ctx) as handle:
        outcome = handle.initialize()
    finish(outcome)


def identity(
    ctx: typer.Context,
    name: str = typer.Option("", "--name", "-n", help="Author name (user.name)"),
    email: str = typer.Option("", "--email", "-e", help="Author email (user.email)"),
) -> None:
    """
    Show or set the author identity of the repository.

    Examples:
        reposync identity
        reposync identity --name "Ada" --email ada@example.com
    """
    with get_handle(ctx) as handle:
        if not handle.is_repository():
            print_not_git_repo_error()
            raise typer.Exit(ExitCode.USER_ERROR)
        if not name and not email:
            current_name, current_email = handle.identity()
            console.print(f"[bold]Name:[/bold]  {current_name or '[dim]unset[/dim]'}")
            console.print(f"[bold]Email:[/bold] {current_email or '[dim]unset[/dim]'}")
            return
        outcome = handle.configure_identity(name, email)
    finish(outcome)


def clone(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="HTTPS URL of the repository"),
    folder: str | None = typer.Argument(None, help="Folder name (default: from URL)"),
    parent: Path = typer.Option(
        Path("."), "--parent", "-p", help="Directory to clone into"
    ),
    token: str | None = typer.Option(None, "--token", help=TOKEN_OPTION_HELP),
) -> None:
    """
    Clone a remote repository.

    Examples:
        reposync clone https://example.com/team/project.git
        reposync clone https://example.com/team/project.git work -p ~/src
    """
    if folder is None:
        folder = url.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git") or "repository"

    handle, outcome = RepositoryHandle.clone(
        url,
        parent,
        folder,
        token=resolve_token(ctx, token),
        config=get_config(ctx),
    )
    if handle is not None:
        handle.close()
    finish(outcome)
