"""
Standardized error handling and exit codes for the reposync CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

import typer
from rich.console import Console

from reposync.core.errors import ErrorKind
from reposync.core.outcome import Outcome, Severity

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for reposync CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Operation failed."""

    USER_ERROR = 2
    """User input or repository setup error (actionable by user)."""

    CONFLICT = 3
    """Operation stopped on conflicts that need resolving."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


_SEVERITY_STYLE = {
    Severity.SUCCESS: ("green", "✓"),
    Severity.WARNING: ("yellow", "⚠"),
    Severity.ERROR: ("red", "✗"),
}

# Guidance shown under a failed operation
_SOLUTIONS: dict[ErrorKind, str] = {
    ErrorKind.NOT_A_REPOSITORY: "reposync init  # or pass --repo PATH",
    ErrorKind.REPOSITORY_EMPTY: "reposync changes commit -m 'Initial commit'",
    ErrorKind.DIRTY_WORKING_TREE: "reposync stash save  # or commit your changes",
    ErrorKind.NO_REMOTE: "reposync sync remote https://host/owner/repo.git",
    ErrorKind.NO_DEFAULT_REMOTE_BRANCH: "reposync branch checkout <remote-branch>",
    ErrorKind.AUTH_FAILURE: "export REPOSYNC_TOKEN=<token>  # or pass --token",
    ErrorKind.NETWORK_FAILURE: "check the connection and retry",
    ErrorKind.STASH_NOT_FOUND: "reposync stash list",
    ErrorKind.COMMIT_NOT_FOUND: "reposync log list",
    ErrorKind.BRANCH_NOT_FOUND: "reposync branch list",
    ErrorKind.PATH_NOT_CONFLICTING: "reposync conflicts list",
}


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Not a git repository",
        ...     solution="reposync init",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_not_git_repo_error() -> None:
    """Print error when the target directory is not a repository."""
    print_error(
        "Not a git repository",
        reason="The directory has no repository metadata",
        solution=_SOLUTIONS[ErrorKind.NOT_A_REPOSITORY],
    )


def exit_code_for(outcome: Outcome) -> ExitCode:
    if outcome.has_conflicts:
        return ExitCode.CONFLICT
    if not outcome.success:
        return ExitCode.GENERAL_ERROR
    return ExitCode.SUCCESS


def print_outcome(outcome: Outcome) -> None:
    """Render an outcome with its severity colour."""
    if not outcome.success and outcome.error_kind is not None:
        print_error(
            outcome.message,
            reason=f"{outcome.operation} failed ({outcome.error_kind.value})",
            solution=_SOLUTIONS.get(outcome.error_kind),
        )
        return

    colour, mark = _SEVERITY_STYLE[outcome.severity]
    console.print(f"[{colour}]{mark}[/{colour}] {outcome.message}")
    if outcome.has_conflicts:
        console.print("[cyan]→ Try:[/cyan] reposync conflicts list")


def finish(outcome: Outcome) -> None:
    """Print an outcome and exit with its code when it did not succeed."""
    print_outcome(outcome)
    code = exit_code_for(outcome)
    if code != ExitCode.SUCCESS:
        raise typer.Exit(code)
