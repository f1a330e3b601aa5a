"""
reposync stash commands.

Stash indices are positional; run ``reposync stash list`` again after
every change before using an index.
"""

import typer
from rich.console import Console
from rich.table import Table

from reposync.cli.context import get_handle
from reposync.cli.errors import finish
from reposync.core.stash import StashOrchestrator

console = Console()
app = typer.Typer(
    name="stash",
    help="Save and restore uncommitted work",
    no_args_is_help=True,
)


@app.command("list")
def list_stash(ctx: typer.Context) -> None:
    """List stash entries, newest first."""
    with get_handle(ctx) as handle:
        entries = StashOrchestrator(handle).list()

    if not entries:
        console.print("[dim]No stash entries[/dim]")
        return

    table = Table(title="Stash")
    table.add_column("Index", justify="right")
    table.add_column("Hash", style="dim")
    table.add_column("Message")
    for entry in entries:
        table.add_row(str(entry.index), entry.short_hash, entry.message)
    console.print(table)


@app.command()
def save(
    ctx: typer.Context,
    message: str = typer.Option("", "--message", "-m", help="Stash message"),
) -> None:
    """Stash all working-tree changes, untracked files included."""
    with get_handle(ctx) as handle:
        outcome = StashOrchestrator(handle).create(message)
    finish(outcome)


@app.command()
def apply(
    ctx: typer.Context,
    index: int = typer.Argument(0, help="Stash index"),
    drop: bool = typer.Option(False, "--drop", help="Drop the entry after a clean apply"),
) -> None:
    """Apply a stash entry."""
    with get_handle(ctx) as handle:
        outcome = StashOrchestrator(handle).apply(index, drop=drop)
    finish(outcome)


@app.command()
def pop(ctx: typer.Context, index: int = typer.Argument(0, help="Stash index")) -> None:
    """Apply a stash entry and drop it."""
    with get_handle(ctx) as handle:
        outcome = StashOrchestrator(handle).pop(index)
    finish(outcome)


@app.command()
def drop(ctx: typer.Context, index: int = typer.Argument(..., help="Stash index")) -> None:
    """Drop a stash entry."""
    with get_handle(ctx) as handle:
        outcome = StashOrchestrator(handle).drop(index)
    finish(outcome)
