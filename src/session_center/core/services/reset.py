"""
Reset service: undo everything an install and a dashboard run left behind.

A reset run, in order:
    1. Backs up every artifact, deployed script and state file
    2. Removes our hook registrations from every known target
    3. Removes deployed hook scripts whose content identifies them as ours
    4. Cleans local data (server config, session database, message queue)
    5. Asks a running dashboard server to clear browser state

Every step records per-file results instead of raising, so one failure never
stops the rest of the run. A state file whose backup failed is kept. If the
snapshot directory itself cannot be created the run stops after step 1 and
nothing is changed.
"""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

import httpx
from pydantic import BaseModel, Field

from session_center.core.backup import BackupManager, BackupSnapshot, BackupStatus
from session_center.core.config import SessionCenterConfig, load_config
from session_center.core.hooks.models import ReconcileReport
from session_center.core.hooks.platform import PlatformResolver
from session_center.core.hooks.scripts import ScriptResult, remove_target_scripts
from session_center.core.services.hooks import HookService

logger = logging.getLogger(__name__)

# SQLite sidecar files travel with the database
DATABASE_SIDECARS = ("-shm", "-wal")


class CleanupStatus(str, Enum):
    """Outcome of cleaning one local data path."""

    REMOVED = "removed"
    MISSING = "missing"
    KEPT = "kept"
    FAILED = "failed"


class CleanupResult(BaseModel):
    """Result of cleaning one local data path."""

    path: str
    status: CleanupStatus
    error: str | None = None


class SignalStatus(str, Enum):
    """Outcome of the clear-browser-state signal."""

    SENT = "sent"
    REJECTED = "rejected"
    UNREACHABLE = "unreachable"
    SKIPPED = "skipped"


class BrowserSignal(BaseModel):
    """Result of asking the dashboard server to clear browser state."""

    url: str
    status: SignalStatus
    status_code: int | None = None
    message: str | None = None


class ResetReport(BaseModel):
    """Everything a reset run did, step by step."""

    snapshot: BackupSnapshot | None = None
    planned_backup: list[str] = Field(default_factory=list)
    backup_error: str | None = None
    reconciles: list[ReconcileReport] = Field(default_factory=list)
    scripts: list[ScriptResult] = Field(default_factory=list)
    cleanup: list[CleanupResult] = Field(default_factory=list)
    browser: BrowserSignal | None = None
    dry_run: bool = False


class ResetService:
    """
    Runs a full reset for one configuration.

    Example:
        >>> service = ResetService.from_config()
        >>> report = service.run()
        >>> print(report.snapshot.path)
    """

    def __init__(
        self,
        config: SessionCenterConfig,
        resolver: PlatformResolver | None = None,
        backup_manager: BackupManager | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver or PlatformResolver(home=config.home_dir)
        self.hooks = HookService(config, resolver=self.resolver)
        self.backup_manager = backup_manager or BackupManager(config.backups_dir)

    @classmethod
    def from_config(cls, config: SessionCenterConfig | None = None) -> ResetService:
        """Create service from a config, loading it if not given."""
        return cls(config or load_config())

    def run(self, dry_run: bool = False) -> ResetReport:
        """
        Execute every reset step.

        Args:
            dry_run: Report what would happen; nothing is copied, written,
                deleted or sent

        Returns:
            ResetReport with the results of each step that ran; only
            `backup_error` is set when the snapshot could not be created
        """
        report = ResetReport(dry_run=dry_run)
        targets = self.hooks.targets

        if dry_run:
            report.planned_backup = [
                str(source)
                for source, _ in self.backup_manager.plan(targets, self.config.state_files)
                if source.exists()
            ]
        else:
            try:
                report.snapshot = self.backup_manager.snapshot(targets, self.config.state_files)
            except OSError as e:
                logger.warning(f"Could not create backup directory: {e}")
                report.backup_error = str(e)
                return report

        report.reconciles = self.hooks.uninstall(dry_run=dry_run)

        for target in targets:
            report.scripts.extend(
                remove_target_scripts(target, self.hooks.classifier, dry_run=dry_run)
            )

        report.cleanup = self.clean_local_data(report.snapshot, dry_run=dry_run)

        if dry_run:
            report.browser = BrowserSignal(url=self.config.reset_url, status=SignalStatus.SKIPPED)
        else:
            report.browser = self.clear_browser_state()

        return report

    def clean_local_data(
        self, snapshot: BackupSnapshot | None, dry_run: bool = False
    ) -> list[CleanupResult]:
        """
        Remove persisted state files and the message-queue directory.

        A state file is only removed when the snapshot holds a copy of it.
        """
        results = [
            self._remove_file(self.config.server_config_path, snapshot, dry_run),
        ]

        database = self._remove_file(self.config.database_path, snapshot, dry_run)
        results.append(database)
        if database.status != CleanupStatus.KEPT:
            for suffix in DATABASE_SIDECARS:
                sidecar = self.config.database_path.with_name(
                    self.config.database_path.name + suffix
                )
                if sidecar.exists():
                    results.append(self._remove_file(sidecar, None, dry_run, backed_up=True))

        results.append(self._remove_dir(self.resolver.mq_dir, dry_run))
        return results

    def clear_browser_state(self) -> BrowserSignal:
        """
        POST to the dashboard's reset endpoint, once, with a short timeout.

        Failure is advisory: an unreachable server just means the browser
        clears itself on its next connect.
        """
        url = self.config.reset_url
        try:
            response = httpx.post(url, timeout=self.config.reset_timeout)
        except httpx.HTTPError as e:
            logger.debug(f"Reset signal not delivered: {e}")
            return BrowserSignal(url=url, status=SignalStatus.UNREACHABLE, message=str(e))

        if response.is_success:
            return BrowserSignal(
                url=url, status=SignalStatus.SENT, status_code=response.status_code
            )
        return BrowserSignal(
            url=url,
            status=SignalStatus.REJECTED,
            status_code=response.status_code,
            message=f"Server responded with {response.status_code}",
        )

    def _remove_file(
        self,
        path: Path,
        snapshot: BackupSnapshot | None,
        dry_run: bool,
        backed_up: bool = False,
    ) -> CleanupResult:
        if not path.exists():
            return CleanupResult(path=str(path), status=CleanupStatus.MISSING)

        if not dry_run and not backed_up and not self._in_snapshot(path, snapshot):
            logger.warning(f"Keeping {path}: no backup copy was made")
            return CleanupResult(
                path=str(path), status=CleanupStatus.KEPT, error="no backup copy was made"
            )

        if not dry_run:
            try:
                path.unlink()
            except OSError as e:
                logger.warning(f"Could not remove {path}: {e}")
                return CleanupResult(path=str(path), status=CleanupStatus.FAILED, error=str(e))
            logger.info(f"Removed {path}")
        return CleanupResult(path=str(path), status=CleanupStatus.REMOVED)

    def _remove_dir(self, path: Path, dry_run: bool) -> CleanupResult:
        if not path.exists():
            return CleanupResult(path=str(path), status=CleanupStatus.MISSING)
        if not dry_run:
            shutil.rmtree(path, ignore_errors=True)
            if path.exists():
                return CleanupResult(
                    path=str(path), status=CleanupStatus.FAILED, error="directory not removed"
                )
            logger.info(f"Removed {path}")
        return CleanupResult(path=str(path), status=CleanupStatus.REMOVED)

    @staticmethod
    def _in_snapshot(path: Path, snapshot: BackupSnapshot | None) -> bool:
        if snapshot is None:
            return False
        return any(
            entry.source == str(path) and entry.status == BackupStatus.COPIED
            for entry in snapshot.entries
        )
