"""
reposync conflicts commands.
"""

import typer
from rich.console import Console
from rich.syntax import Syntax

from reposync.cli.context import get_handle
from reposync.cli.errors import finish
from reposync.core.conflicts import ConflictResolver

console = Console()
app = typer.Typer(
    name="conflicts",
    help="Resolve conflicting files",
    no_args_is_help=True,
)


@app.command("list")
def list_conflicts(ctx: typer.Context) -> None:
    """List files in conflict."""
    with get_handle(ctx) as handle:
        paths = ConflictResolver(handle).list_conflicts()

    if not paths:
        console.print("[green]No conflicts[/green]")
        return
    for path in paths:
        console.print(f"[red]✗[/red] {path}")


@app.command()
def show(ctx: typer.Context, path: str = typer.Argument(..., help="Conflicting file")) -> None:
    """Show a file with its conflict markers."""
    with get_handle(ctx) as handle:
        content = ConflictResolver(handle).read_file(path)
    if not content:
        console.print(f"[dim]{path} is empty or missing[/dim]")
        return
    console.print(Syntax(content, Syntax.guess_lexer(path, content), line_numbers=True))


@app.command()
def ours(ctx: typer.Context, path: str = typer.Argument(..., help="Conflicting file")) -> None:
    """Resolve a file with the current branch's version."""
    with get_handle(ctx) as handle:
        outcome = ConflictResolver(handle).resolve_ours(path)
    finish(outcome)


@app.command()
def theirs(ctx: typer.Context, path: str = typer.Argument(..., help="Conflicting file")) -> None:
    """Resolve a file with the incoming version."""
    with get_handle(ctx) as handle:
        outcome = ConflictResolver(handle).resolve_theirs(path)
    finish(outcome)
