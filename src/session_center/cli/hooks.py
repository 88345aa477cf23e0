"""
Hook management commands.

Provides commands to install, uninstall and inspect the dashboard's hook
registrations in Claude Code, Gemini CLI and Codex CLI configuration.
"""

from enum import Enum
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from session_center.cli.errors import ExitCode, print_template_missing_error
from session_center.cli.output import print_reconcile_report, print_script_result
from session_center.core.config import load_config
from session_center.core.hooks.errors import TemplateMissingError
from session_center.core.hooks.models import ReconcileAction
from session_center.core.services.hooks import HookService

app = typer.Typer(
    name="hooks",
    help="Manage hook registrations in Claude Code, Gemini CLI and Codex CLI",
    no_args_is_help=True,
)

console = Console()


class Density(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class CliName(str, Enum):
    claude = "claude"
    gemini = "gemini"
    codex = "codex"


@app.command(name="install")
def install(
    cli: Optional[list[CliName]] = typer.Option(
        None,
        "--cli",
        "-c",
        help="Host application to install into (repeatable; default: configured CLIs)",
    ),
    density: Optional[Density] = typer.Option(
        None,
        "--density",
        "-d",
        help="How many events to register (default: configured density)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would change without writing anything",
    ),
) -> None:
    """
    Register dashboard hooks in host application settings.

    Copies the hook scripts into each host's hooks directory and adds one
    hook group per event to its settings. Existing hooks from you or other
    tools are never modified. Running it again is safe: registered events
    are reported as already registered.

    Examples:
        session-center hooks install                     # Configured CLIs
        session-center hooks install -c claude -c gemini # Specific CLIs
        session-center hooks install --density low       # Fewer events
    """
    config = load_config()
    service = HookService(config)
    clis = [name.value for name in cli] if cli else None

    try:
        report = service.install(
            clis=clis,
            density=density.value if density else None,
            dry_run=dry_run,
        )
    except TemplateMissingError as e:
        print_template_missing_error(str(e.template))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    console.print(f"[blue]Installing hooks[/blue] (density: {report.density})")
    for script in report.scripts:
        print_script_result(script)
    for reconcile in report.reconciles:
        print_reconcile_report(reconcile)

    added = sum(r.count(ReconcileAction.ADDED) for r in report.reconciles)
    updated = sum(r.count(ReconcileAction.UPDATED) for r in report.reconciles)
    if dry_run:
        console.print("\n[yellow]Dry run - no changes made[/yellow]")
    elif added or updated:
        console.print(f"\n[green]✓[/green] {added} hook(s) added, {updated} updated")
    else:
        console.print("\n[green]✓[/green] All hooks already registered")


@app.command(name="uninstall")
def uninstall(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be removed without writing anything",
    ),
) -> None:
    """
    Remove dashboard hook registrations from every host application.

    Only hook groups carrying our marker (or, for older installs, invoking
    our hook script) are removed. Deployed scripts and local data are left
    alone; use 'session-center reset' for a full cleanup.

    Examples:
        session-center hooks uninstall
        session-center hooks uninstall --dry-run
    """
    service = HookService(load_config())

    console.print("[blue]Removing dashboard hooks from settings[/blue]")
    for report in service.uninstall(dry_run=dry_run):
        print_reconcile_report(report)

    if dry_run:
        console.print("\n[yellow]Dry run - no changes made[/yellow]")


@app.command(name="status")
def status() -> None:
    """
    Show which events are registered in each enabled host application.

    Nothing is written; this reports what 'hooks install' would do.

    Examples:
        session-center hooks status
    """
    config = load_config()
    service = HookService(config)
    reports = service.status()

    table = Table(
        title=f"Hook Registrations (density: {config.hook_density})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Target", style="white")
    table.add_column("Event", style="white")
    table.add_column("State", style="white")
    table.add_column("Settings", style="dim")

    states = {
        ReconcileAction.ALREADY_REGISTERED: "[green]registered[/green]",
        ReconcileAction.ADDED: "[yellow]missing[/yellow]",
        ReconcileAction.UPDATED: "[yellow]outdated[/yellow]",
        ReconcileAction.REMOVED: "[yellow]stale[/yellow]",
        ReconcileAction.SKIPPED: "[dim]not managed[/dim]",
    }

    for report in reports:
        settings = escape(report.artifact_path)
        for warning in report.warnings:
            table.add_row(report.target, "-", f"[red]{escape(warning)}[/red]", settings)
        for event in report.events:
            table.add_row(report.target, event.event, states[event.action], settings)

    console.print(table)


__all__ = ["app"]
