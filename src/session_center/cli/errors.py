"""
Standardized error handling and exit codes for the session-center CLI.

Warnings never change the exit code; the only failing exit is a broken
installation (a bundled hook template is missing).
"""

from enum import IntEnum

from rich.console import Console

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for session-center operations."""

    SUCCESS = 0
    """Operation completed, possibly with warnings."""

    GENERAL_ERROR = 1
    """Unrecoverable defect (a bundled template is missing, or reset could not back up)."""


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
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_template_missing_error(template: str) -> None:
    """Print error when a bundled hook template is missing."""
    print_error(
        f"Bundled hook template not found: {template}",
        reason="The installation is incomplete; no configuration was changed",
        solution="pip install --force-reinstall agent-session-center",
    )
