"""
reposync ignore commands.
"""

import typer
from rich.console import Console

from reposync.cli.context import repo_dir
from reposync.cli.errors import ExitCode, finish, print_error
from reposync.core.errors import RepoSyncError
from reposync.core.ignore import TEMPLATES, IgnoreFile
from reposync.core.ignore.service import ENCODING_ERRORS

console = Console()
app = typer.Typer(
    name="ignore",
    help="Edit the ignore file",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the ignore file."""
    try:
        content = IgnoreFile(repo_dir(ctx)).read()
    except RepoSyncError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    if not content:
        console.print("[dim]No ignore file[/dim]")
        return
    # Undecodable bytes show as replacement characters
    printable = content.encode("utf-8", ENCODING_ERRORS).decode("utf-8", "replace")
    console.print(printable, markup=False, highlight=False, end="")


@app.command()
def template(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Template name (omit to list)"),
) -> None:
    """
    Append a built-in template to the ignore file.

    Examples:
        reposync ignore template
        reposync ignore template "Python / AI"
    """
    if name is None:
        for template_name in TEMPLATES:
            console.print(f"  {template_name}")
        return

    if name not in TEMPLATES:
        print_error(
            f"Unknown template: {name}",
            solution="reposync ignore template  # to list templates",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    finish(IgnoreFile(repo_dir(ctx)).apply_template(name))
