"""
reposync log commands.

Commit history with pushed/unpushed markers and single-commit operations.
"""

import typer
from rich.console import Console
from rich.table import Table

from reposync.cli.context import get_handle
from reposync.cli.errors import finish
from reposync.core.history import CommitHistoryService

console = Console()
app = typer.Typer(
    name="log",
    help="Browse history and act on single commits",
    no_args_is_help=True,
)


@app.command("list")
def list_commits(
    ctx: typer.Context,
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Show at most N commits"),
    unpushed: bool = typer.Option(False, "--unpushed", help="Only commits not on the remote"),
) -> None:
    """Show the log of HEAD."""
    with get_handle(ctx) as handle:
        history = CommitHistoryService(handle)
        commits = history.unpushed() if unpushed else history.list(limit)

    if limit is not None:
        commits = commits[:limit]
    if not commits:
        console.print("[dim]No commits[/dim]")
        return

    table = Table(title="Commits")
    table.add_column("Hash", style="yellow")
    table.add_column("Author")
    table.add_column("Date", style="dim")
    table.add_column("Message")
    table.add_column("Pushed")
    for commit in commits:
        subject = commit.full_message.splitlines()[0] if commit.full_message else ""
        pushed = "[green]✓[/green]" if commit.is_pushed else "[yellow]↑[/yellow]"
        table.add_row(
            commit.short_hash,
            commit.author_name,
            commit.author_date.strftime("%Y-%m-%d %H:%M"),
            subject,
            pushed,
        )
    console.print(table)


@app.command()
def checkout(ctx: typer.Context, commit: str = typer.Argument(..., help="Commit hash")) -> None:
    """Check out a commit with a detached HEAD."""
    with get_handle(ctx) as handle:
        outcome = CommitHistoryService(handle).checkout(commit)
    finish(outcome)


@app.command()
def reset(
    ctx: typer.Context,
    commit: str = typer.Argument(..., help="Commit hash"),
    hard: bool = typer.Option(False, "--hard", help="Discard working-tree changes"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation for --hard"),
) -> None:
    """Move the current branch to a commit."""
    if hard and not yes:
        typer.confirm("Hard reset discards uncommitted changes. Continue?", abort=True)
    with get_handle(ctx) as handle:
        outcome = CommitHistoryService(handle).reset(commit, hard=hard)
    finish(outcome)


@app.command()
def revert(ctx: typer.Context, commit: str = typer.Argument(..., help="Commit hash")) -> None:
    """Create a commit that undoes another."""
    with get_handle(ctx) as handle:
        outcome = CommitHistoryService(handle).revert(commit)
    finish(outcome)


@app.command("cherry-pick")
def cherry_pick(ctx: typer.Context, commit: str = typer.Argument(..., help="Commit hash")) -> None:
    """Apply a commit on top of HEAD."""
    with get_handle(ctx) as handle:
        outcome = CommitHistoryService(handle).cherry_pick(commit)
    finish(outcome)
