"""
Reset and backup commands.

`session-center reset` undoes everything an install and a dashboard run left
behind, after taking a backup snapshot. `session-center backups` lists the
snapshots taken so far.
"""

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from session_center.cli.errors import ExitCode
from session_center.cli.output import (
    info,
    ok,
    print_reconcile_report,
    print_script_result,
    step,
    warn,
)
from session_center.core.backup import BackupManager, BackupStatus
from session_center.core.config import load_config
from session_center.core.services.reset import (
    CleanupStatus,
    ResetReport,
    ResetService,
    SignalStatus,
)

console = Console()

TOTAL_STEPS = 6


def reset(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be done without changing anything",
    ),
) -> None:
    """
    Remove all dashboard hooks, scripts and local data.

    A backup of every settings file, hook script and database is taken first,
    under <data-dir>/backups/reset-<timestamp>/. Hooks and scripts that belong
    to you or to other tools are never removed.

    Examples:
        session-center reset              # Asks for confirmation
        session-center reset --yes        # No prompt
        session-center reset --dry-run    # Show what would happen
    """
    config = load_config()
    service = ResetService(config)

    console.print()
    console.print(
        Panel("[bold]AI Agent Session Center: Full Reset[/bold]", border_style="red", expand=False)
    )

    if not dry_run and not yes:
        if not typer.confirm("Remove all dashboard hooks and local data?"):
            console.print("[dim]Cancelled[/dim]")
            raise typer.Exit(ExitCode.SUCCESS)

    report = service.run(dry_run=dry_run)
    _print_report(report)
    if report.backup_error is not None:
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _print_report(report: ResetReport) -> None:
    step(1, TOTAL_STEPS, "Backing up current state...")
    if report.dry_run:
        for path in report.planned_backup:
            info(f"Would back up {escape(path)}")
        info(f"{len(report.planned_backup)} file(s) would be backed up")
    elif report.snapshot is None:
        warn(f"Could not create backup directory: {escape(report.backup_error or '')}")
        console.print("\n[red]Reset aborted: nothing was changed[/red]")
        return
    else:
        ok(f"Backup directory: [dim]{escape(str(report.snapshot.path))}[/dim]")
        for entry in report.snapshot.entries:
            if entry.status == BackupStatus.COPIED:
                ok(f"Backed up {escape(entry.source)}")
            elif entry.status == BackupStatus.FAILED:
                warn(f"Could not back up {escape(entry.source)}: {escape(entry.error or '')}")
        info(f"{report.snapshot.files_captured} file(s) backed up")

    step(2, TOTAL_STEPS, "Removing dashboard hooks from settings...")
    for reconcile in report.reconciles:
        print_reconcile_report(reconcile)

    step(3, TOTAL_STEPS, "Removing deployed hook scripts...")
    for script in report.scripts:
        print_script_result(script)

    step(4, TOTAL_STEPS, "Cleaning local data...")
    for result in report.cleanup:
        path = escape(result.path)
        if result.status == CleanupStatus.REMOVED:
            ok(f"Removed {path}")
        elif result.status == CleanupStatus.MISSING:
            info(f"{path} not found")
        else:
            warn(f"Kept {path}: {escape(result.error or '')}")

    step(5, TOTAL_STEPS, "Clearing browser state...")
    browser = report.browser
    if browser is None or browser.status == SignalStatus.SKIPPED:
        info("Skipped (dry run)")
    elif browser.status == SignalStatus.SENT:
        ok("Sent clearBrowserDb signal to all connected browsers")
    elif browser.status == SignalStatus.REJECTED:
        warn(f"Server responded with {browser.status_code}")
    else:
        info("Server not running, browser state will be cleared on next connect")

    step(6, TOTAL_STEPS, "Summary")
    if report.dry_run:
        console.print("\n[yellow]Dry run - no changes made[/yellow]")
        return

    if report.snapshot is not None:
        info(f"Backup location: [bold]{escape(str(report.snapshot.path))}[/bold]")
        for name in sorted(p.name for p in report.snapshot.path.iterdir()):
            info(f"  [dim]{escape(name)}[/dim]")

    console.print("\n[green]────────────────────────────────────────────────[/green]")
    console.print("  [green]✓ Reset complete[/green]")
    console.print("[green]────────────────────────────────────────────────[/green]")
    console.print("\n  To set up again:    [bold]session-center hooks install[/bold]")
    if report.snapshot is not None:
        console.print(
            f"  To restore backup:  [dim]see {escape(str(report.snapshot.path))}[/dim]\n"
        )


def backups() -> None:
    """
    List backup snapshots taken by previous resets, newest first.

    Examples:
        session-center backups
    """
    config = load_config()
    snapshots = BackupManager(config.backups_dir).list_snapshots()

    if not snapshots:
        console.print(f"[dim]No backups in {escape(str(config.backups_dir))}[/dim]")
        raise typer.Exit(ExitCode.SUCCESS)

    console.print(f"[bold]Backups in {escape(str(config.backups_dir))}[/bold]")
    for snapshot in snapshots:
        files = sorted(p.name for p in snapshot.iterdir())
        console.print(f"  {escape(snapshot.name)}  [dim]({len(files)} file(s))[/dim]")
        for name in files:
            console.print(f"    [dim]{escape(name)}[/dim]")


__all__ = ["backups", "reset"]
