"""
session-center CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from session_center import __version__
from session_center.cli import hooks, reset
from session_center.core.config.env import load_env_overrides

app = typer.Typer(
    name="session-center",
    help="Register and safely remove AI Agent Session Center hooks",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    AI Agent Session Center - hook registration manager.

    Registers the dashboard's hooks in Claude Code, Gemini CLI and Codex CLI
    settings, and removes them again without touching anything else.

    Quick Start:
        session-center hooks install     # Register hooks
        session-center hooks status      # See what is registered
        session-center reset             # Back up, then remove everything
    """
    setup_logging(debug)
    # Env files may carry SESSION_CENTER_* overrides read by load_config()
    load_env_overrides()
    ctx.obj = {"debug": debug}


app.add_typer(hooks.app, name="hooks")
app.command(name="reset")(reset.reset)
app.command(name="backups")(reset.backups)


@app.command()
def version() -> None:
    """Show session-center version and exit."""
    console.print(f"session-center version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
