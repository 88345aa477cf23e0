"""
Line-by-line console reporting shared by the hooks and reset commands.

Every action is printed with a distinguishing marker so a human can audit
exactly what changed:
    ✓  something was added, updated, removed or succeeded
    =  already in the desired state
    ⚠  warning, or an item deliberately skipped
    →  informational
"""

from rich.console import Console
from rich.markup import escape

from session_center.core.hooks.models import ReconcileAction, ReconcileMode, ReconcileReport
from session_center.core.hooks.scripts import ScriptResult, ScriptStatus

console = Console()


def ok(message: str) -> None:
    console.print(f"  [green]✓[/green] {message}")


def same(message: str) -> None:
    console.print(f"  [dim]=[/dim] {message}")


def warn(message: str) -> None:
    console.print(f"  [yellow]⚠[/yellow] {message}")


def info(message: str) -> None:
    console.print(f"  [dim]→[/dim] {message}")


def step(number: int, total: int, label: str) -> None:
    console.print(f"\n[cyan]\\[{number}/{total}][/cyan] [bold]{label}[/bold]")


def print_reconcile_report(report: ReconcileReport) -> None:
    """Print every action recorded in a reconcile report."""
    label = escape(f"[{report.target}]")

    for note in report.notes:
        info(escape(note))
    for warning in report.warnings:
        warn(escape(warning))

    for event in report.events:
        detail = f" ({escape(event.detail)})" if event.detail else ""
        if event.action == ReconcileAction.ADDED:
            ok(f"{label} Added hook for {event.event}")
        elif event.action == ReconcileAction.UPDATED:
            ok(f"{label} Updated hook for {event.event}{detail}")
        elif event.action == ReconcileAction.ALREADY_REGISTERED:
            same(f"{label} {event.event} already registered")
        elif event.action == ReconcileAction.REMOVED and report.lines_removed:
            for line in report.removed_lines:
                ok(f"{label} Removing line: [dim]{escape(line)}[/dim]")
        elif event.action == ReconcileAction.REMOVED:
            ok(f"{label} Removing {event.count} hook(s) for {event.event}{detail}")
        else:
            warn(f"{label} Skipped {event.event}{detail}")

    if report.warnings:
        return

    if report.mode == ReconcileMode.INSTALL:
        _print_install_summary(report, label)
    else:
        _print_uninstall_summary(report, label)

    if report.dry_run and report.changed:
        info(f"{label} Dry run: {escape(report.artifact_path)} not written")


def _print_install_summary(report: ReconcileReport, label: str) -> None:
    added = report.count(ReconcileAction.ADDED)
    updated = report.count(ReconcileAction.UPDATED)
    registered = report.count(ReconcileAction.ALREADY_REGISTERED)
    if added or updated or registered:
        info(
            f"{label} {added} added, {updated} updated, {registered} already registered"
            f" in {escape(report.artifact_path)}"
        )


def _print_uninstall_summary(report: ReconcileReport, label: str) -> None:
    removed = report.count(ReconcileAction.REMOVED)
    if report.notes and not report.events and not report.preserved and not report.lines_preserved:
        return

    if report.lines_removed or report.lines_preserved:
        if removed:
            ok(f"{label} {removed} line(s) removed from {escape(report.artifact_path)}")
        else:
            info(f"{label} No dashboard hooks found")
        if report.lines_preserved:
            info(f"[yellow]Preserved[/yellow] {report.lines_preserved} other line(s) in {label}")
        return

    if removed:
        ok(f"{label} {removed} dashboard hook(s) removed")
    else:
        info(f"{label} No dashboard hooks found")

    if report.preserved:
        events = {fragment.event for fragment in report.preserved}
        info(
            f"[yellow]Preserved[/yellow] {len(report.preserved)} non-dashboard hook(s)"
            f" across {len(events)} event(s) in {label}:"
        )
        for fragment in report.preserved:
            commands = ", ".join(fragment.commands) or "?"
            info(f"  [dim]{fragment.event}: {escape(commands)}[/dim]")


def print_script_result(result: ScriptResult) -> None:
    """Print the outcome of deploying or removing one hook script."""
    path = escape(result.path)
    target = escape(result.target)
    if result.status == ScriptStatus.COPIED:
        ok(f"Installed {target} hook script: [dim]{path}[/dim]")
    elif result.status == ScriptStatus.UNCHANGED:
        same(f"{target} hook script up to date: [dim]{path}[/dim]")
    elif result.status == ScriptStatus.REMOVED:
        ok(f"Removed {target} hook script: [dim]{path}[/dim]")
    elif result.status == ScriptStatus.MISSING:
        info(f"{target} {path} not found [dim](already clean)[/dim]")
    elif result.status == ScriptStatus.SKIPPED:
        warn(
            f"[yellow]SKIPPED[/yellow] {target}: {path} does not contain our project marker,"
            " may belong to another tool"
        )
    else:
        warn(f"Could not handle {target} script {path}: {escape(result.error or '')}")
