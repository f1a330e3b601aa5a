"""
reposync branch commands.
"""

import typer
from rich.console import Console
from rich.table import Table

from reposync.cli.context import get_handle
from reposync.cli.errors import finish
from reposync.core.branches import BranchOrchestrator
from reposync.core.models import BranchKind

console = Console()
app = typer.Typer(
    name="branch",
    help="List, switch, create and combine branches",
    no_args_is_help=True,
)


@app.command("list")
def list_branches(
    ctx: typer.Context,
    local: bool = typer.Option(False, "--local", "-l", help="Only local branches"),
) -> None:
    """List branches, current first."""
    with get_handle(ctx) as handle:
        branches = BranchOrchestrator(handle).list_rich()

    if local:
        branches = [b for b in branches if b.kind is BranchKind.LOCAL]
    if not branches:
        console.print("[dim]No branches yet[/dim]")
        return

    table = Table(title="Branches")
    table.add_column("", width=1)
    table.add_column("Name")
    table.add_column("Kind", style="dim")
    for branch in branches:
        marker = "[green]*[/green]" if branch.is_current else ""
        name = f"[bold]{branch.short_name}[/bold]" if branch.is_current else branch.short_name
        table.add_row(marker, name, branch.kind.value)
    console.print(table)


@app.command()
def checkout(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Branch to switch to"),
    allow_empty: bool = typer.Option(
        False,
        "--allow-empty",
        help="In a repository without commits, rename the unborn branch instead of failing",
    ),
) -> None:
    """
    Switch branches.

    A local branch is checked out, a remote branch of the same name is
    tracked, otherwise a new branch is created at HEAD.
    """
    with get_handle(ctx) as handle:
        outcome = BranchOrchestrator(handle).checkout(name, require_commit=not allow_empty)
    finish(outcome)


@app.command()
def create(ctx: typer.Context, name: str = typer.Argument(..., help="New branch name")) -> None:
    """Create a branch at HEAD without switching to it."""
    with get_handle(ctx) as handle:
        outcome = BranchOrchestrator(handle).create(name)
    finish(outcome)


@app.command()
def delete(ctx: typer.Context, name: str = typer.Argument(..., help="Branch to delete")) -> None:
    """Force-delete a local branch."""
    with get_handle(ctx) as handle:
        outcome = BranchOrchestrator(handle).delete(name)
    finish(outcome)


@app.command()
def rename(ctx: typer.Context, new_name: str = typer.Argument(..., help="New name")) -> None:
    """Rename the current branch."""
    with get_handle(ctx) as handle:
        outcome = BranchOrchestrator(handle).rename(new_name)
    finish(outcome)


@app.command()
def merge(ctx: typer.Context, ref: str = typer.Argument(..., help="Branch or ref to merge")) -> None:
    """Merge a branch into the current one."""
    with get_handle(ctx) as handle:
        outcome = BranchOrchestrator(handle).merge(ref)
    finish(outcome)


@app.command()
def rebase(ctx: typer.Context, ref: str = typer.Argument(..., help="Branch or ref to rebase onto")) -> None:
    """Rebase the current branch onto another."""
    with get_handle(ctx) as handle:
        outcome = BranchOrchestrator(handle).rebase(ref)
    finish(outcome)
