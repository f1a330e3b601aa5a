"""
reposync status command.

Shows the dashboard snapshot of the repository.
"""

import typer
from rich.console import Console
from rich.table import Table

from reposync.cli.context import get_handle
from reposync.cli.errors import ExitCode, print_error, print_not_git_repo_error
from reposync.core.models import SnapshotState
from reposync.core.status import StatusAggregator

console = Console()


def main(ctx: typer.Context) -> None:
    """
    Show the current branch and pending, unpushed and conflicting counts.

    Examples:
        reposync status
        reposync --repo ~/src/project status
    """
    with get_handle(ctx) as handle:
        snapshot = StatusAggregator(handle).snapshot()

    if snapshot.state is SnapshotState.NOT_INITIALIZED:
        print_not_git_repo_error()
        raise typer.Exit(ExitCode.USER_ERROR)

    if snapshot.state is SnapshotState.ERROR:
        print_error("Could not read repository status", reason=snapshot.reason)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Branch", f"[cyan]{snapshot.current_branch}[/cyan]")
    table.add_row("Pending changes", str(snapshot.pending_change_count))
    table.add_row("Unpushed commits", str(snapshot.unpushed_commit_count))

    conflicts = snapshot.conflict_file_count or 0
    style = "red" if conflicts else "green"
    table.add_row("Conflicts", f"[{style}]{conflicts}[/{style}]")
    console.print(table)
