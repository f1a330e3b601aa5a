"""
reposync sync commands.

Fetch, pull and push against the configured remote. Force push and
repair rewrite branch state, so both ask for confirmation first.
"""

import typer
from rich.console import Console

from reposync.cli.context import TOKEN_OPTION_HELP, get_handle, resolve_token
from reposync.cli.errors import finish
from reposync.core.sync import SyncOrchestrator

console = Console()
app = typer.Typer(
    name="sync",
    help="Synchronize with the remote",
    no_args_is_help=True,
)


@app.command()
def fetch(
    ctx: typer.Context,
    token: str | None = typer.Option(None, "--token", help=TOKEN_OPTION_HELP),
) -> None:
    """Fetch every branch of the remote."""
    with get_handle(ctx) as handle:
        outcome = SyncOrchestrator(handle).fetch(resolve_token(ctx, token))
    finish(outcome)


@app.command()
def pull(
    ctx: typer.Context,
    token: str | None = typer.Option(None, "--token", help=TOKEN_OPTION_HELP),
) -> None:
    """
    Fetch and integrate the upstream of the current branch.

    Merges by default; set sync.pull_rebase (or REPOSYNC_PULL_REBASE=1)
    to rebase instead.
    """
    with get_handle(ctx) as handle:
        outcome = SyncOrchestrator(handle).pull(resolve_token(ctx, token))
    finish(outcome)


@app.command()
def push(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite the remote branch"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the force-push confirmation"),
    token: str | None = typer.Option(None, "--token", help=TOKEN_OPTION_HELP),
) -> None:
    """
    Push the current branch.

    Examples:
        reposync sync push
        reposync sync push --force
    """
    if force and not yes:
        typer.confirm(
            "Force push overwrites the remote branch and may discard other people's "
            "commits. Continue?",
            abort=True,
        )
    with get_handle(ctx) as handle:
        outcome = SyncOrchestrator(handle).push(resolve_token(ctx, token), force=force)
    finish(outcome)


@app.command()
def remote(
    ctx: typer.Context,
    url: str | None = typer.Argument(None, help="New HTTPS URL (omit to show)"),
) -> None:
    """Show or set the remote URL."""
    with get_handle(ctx) as handle:
        orchestrator = SyncOrchestrator(handle)
        if url is None:
            current = orchestrator.remote_url()
            if current:
                console.print(f"{orchestrator.remote}  {current}")
            else:
                console.print(f"[dim]No remote '{orchestrator.remote}' configured[/dim]")
            return
        outcome = orchestrator.add_remote(url)
    finish(outcome)


@app.command()
def repair(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation"),
    token: str | None = typer.Option(None, "--token", help=TOKEN_OPTION_HELP),
) -> None:
    """
    Relink the repository to the remote's main/master branch.

    The local branch of that name is moved to the remote tip and checked
    out; working-tree files are kept as local changes.
    """
    if not yes:
        typer.confirm(
            "Repair resets the local main/master branch to the remote. Continue?",
            abort=True,
        )
    with get_handle(ctx) as handle:
        outcome = SyncOrchestrator(handle).link_and_repair(resolve_token(ctx, token))
    finish(outcome)
