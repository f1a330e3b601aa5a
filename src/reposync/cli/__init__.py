"""
RepoSync CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console

from reposync import __version__
from reposync.cli import (
    branch,
    changes,
    conflicts,
    ignore,
    init_cmd,
    log,
    stash,
    status,
    sync,
)
from reposync.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_REPO = "Set Up a Repository"
PANEL_WORK = "Day-to-Day Work"
PANEL_REMOTE = "Work with the Remote"

# Create the main Typer app
app = typer.Typer(
    name="reposync",
    help="Keep a working copy in step with its history, branches and remote",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-C",
        help="Repository root (default: current directory)",
        file_okay=False,
        resolve_path=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    RepoSync - repository state and synchronization.

    Quick Start:
        1. reposync init                       # Create a repository
        2. reposync changes commit -a -m "..."  # Record work
        3. reposync sync remote https://...    # Link the remote
        4. reposync sync push                  # Publish

    Documentation:
        reposync --help                        # This message
        reposync <command> --help              # Help for specific command
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    # Precedence: OS env > project .env > user .env
    load_layered_env(project_dir=repo)

    ctx.obj = {"debug": debug, "repo": repo}


# =============================================================================
# Set Up a Repository
# =============================================================================

app.command(name="init", rich_help_panel=PANEL_REPO)(init_cmd.main)
app.command(name="identity", rich_help_panel=PANEL_REPO)(init_cmd.identity)
app.command(name="clone", rich_help_panel=PANEL_REPO)(init_cmd.clone)
app.add_typer(ignore.app, name="ignore", rich_help_panel=PANEL_REPO)


# =============================================================================
# Day-to-Day Work
# =============================================================================

app.command(name="status", rich_help_panel=PANEL_WORK)(status.main)
app.add_typer(changes.app, name="changes", rich_help_panel=PANEL_WORK)
app.add_typer(branch.app, name="branch", rich_help_panel=PANEL_WORK)
app.add_typer(stash.app, name="stash", rich_help_panel=PANEL_WORK)
app.add_typer(log.app, name="log", rich_help_panel=PANEL_WORK)
app.add_typer(conflicts.app, name="conflicts", rich_help_panel=PANEL_WORK)


# =============================================================================
# Work with the Remote
# =============================================================================

app.add_typer(sync.app, name="sync", rich_help_panel=PANEL_REMOTE)


@app.command()
def version() -> None:
    """Show reposync version and exit."""
    console.print(f"reposync version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
