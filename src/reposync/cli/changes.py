"""
reposync changes commands.

List, stage and commit working-tree changes.
"""

import typer
from rich.console import Console
from rich.table import Table

from reposync.cli.context import get_handle
from reposync.cli.errors import ExitCode, finish, print_error
from reposync.core.changes import ChangesService
from reposync.core.models import ChangeKind

console = Console()
app = typer.Typer(
    name="changes",
    help="Inspect, stage and commit working-tree changes",
    no_args_is_help=True,
)

_KIND_STYLE = {
    ChangeKind.ADDED: "green",
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.DELETED: "red",
    ChangeKind.MISSING: "red",
    ChangeKind.UNTRACKED: "dim",
    ChangeKind.CONFLICTING: "bold red",
}


@app.command("list")
def list_changes(ctx: typer.Context) -> None:
    """List pending changes."""
    with get_handle(ctx) as handle:
        entries = ChangesService(handle).list_changes()

    if not entries:
        console.print("[green]Working tree clean[/green]")
        return

    table = Table(title="Changes")
    table.add_column("Kind")
    table.add_column("Path")
    for entry in entries:
        style = _KIND_STYLE[entry.kind]
        table.add_row(f"[{style}]{entry.kind.value}[/{style}]", entry.path)
    console.print(table)


@app.command()
def stage(
    ctx: typer.Context,
    paths: list[str] | None = typer.Argument(None, help="Paths to stage (default: all)"),
) -> None:
    """
    Stage changes.

    Examples:
        reposync changes stage
        reposync changes stage src/app.py README.md
    """
    with get_handle(ctx) as handle:
        service = ChangesService(handle)
        if not paths:
            outcome = service.stage_all()
        else:
            wanted = set(paths)
            entries = [e for e in service.list_changes() if e.path in wanted]
            unknown = wanted - {e.path for e in entries}
            if unknown:
                print_error(
                    f"No pending change for: {', '.join(sorted(unknown))}",
                    solution="reposync changes list",
                )
                raise typer.Exit(ExitCode.USER_ERROR)
            outcome = service.stage(entries)
    finish(outcome)


@app.command()
def commit(
    ctx: typer.Context,
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
    amend: bool = typer.Option(False, "--amend", help="Replace the last commit"),
    all_changes: bool = typer.Option(
        False, "--all", "-a", help="Stage every change before committing"
    ),
) -> None:
    """
    Commit staged changes.

    Examples:
        reposync changes commit -m "Fix login"
        reposync changes commit -a -m "Update docs"
        reposync changes commit --amend -m "Better message"
    """
    with get_handle(ctx) as handle:
        service = ChangesService(handle)
        if all_changes:
            staged = service.stage_all()
            if not staged.success:
                finish(staged)
        outcome = service.commit(message, amend=amend)
    finish(outcome)


@app.command("last-message")
def last_message(ctx: typer.Context) -> None:
    """Print the message of the last commit."""
    with get_handle(ctx) as handle:
        message = ChangesService(handle).last_commit_message()
    if message:
        console.print(message)
