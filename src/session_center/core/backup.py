"""
Backup snapshots taken before a reset mutates anything.

Every reset creates one directory <backups_dir>/reset-<timestamp>/ holding a
copy of each configuration artifact, deployed hook script and persisted state
file that existed at that moment. Copies are best-effort: a missing file is
skipped, a failed copy is recorded and the pass moves on to the next file.
Snapshots are never modified after creation and never deleted by this tool.

Known limitation: the timestamp has second resolution, so two resets within
the same second write into the same snapshot directory.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from session_center.core.hooks.models import Target

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = "reset-"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class BackupStatus(str, Enum):
    """Outcome of backing up one file."""

    COPIED = "copied"
    MISSING = "missing"
    FAILED = "failed"


class BackupEntry(BaseModel):
    """Result of backing up one file."""

    source: str = Field(description="Original file path")
    name: str = Field(description="Filename inside the snapshot directory")
    status: BackupStatus
    error: str | None = None


class BackupSnapshot(BaseModel):
    """A snapshot directory and what went into it."""

    path: Path
    created_at: datetime
    entries: list[BackupEntry] = Field(default_factory=list)

    @property
    def files_captured(self) -> int:
        return sum(1 for entry in self.entries if entry.status == BackupStatus.COPIED)

    @property
    def failures(self) -> list[BackupEntry]:
        return [entry for entry in self.entries if entry.status == BackupStatus.FAILED]


class BackupManager:
    """
    Creates timestamped backup snapshots.

    Example:
        >>> manager = BackupManager(config.backups_dir)
        >>> snapshot = manager.snapshot(targets, config.state_files)
        >>> print(f"{snapshot.files_captured} file(s) backed up to {snapshot.path}")
    """

    def __init__(
        self,
        backups_dir: Path,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.backups_dir = backups_dir
        self._clock = clock

    def plan(
        self, targets: Sequence[Target], extra_files: Iterable[Path] = ()
    ) -> list[tuple[Path, str]]:
        """
        List every (source, snapshot filename) pair a snapshot would copy.

        Host files are prefixed with the target key (claude-settings.json,
        codex-dashboard-hook.sh); state files keep their own name.
        """
        files = [(path, path.name) for path in extra_files]
        for target in targets:
            files.append((target.artifact_path, f"{target.key}-{target.artifact_path.name}"))
            for script_name in target.script_names:
                files.append((target.hooks_dir / script_name, f"{target.key}-{script_name}"))
        return files

    def snapshot(
        self, targets: Sequence[Target], extra_files: Iterable[Path] = ()
    ) -> BackupSnapshot:
        """
        Copy every existing artifact, script and state file into a new snapshot.

        Args:
            targets: Targets whose artifacts and deployed scripts to copy
            extra_files: Auxiliary persisted state files

        Returns:
            BackupSnapshot with one entry per candidate file

        Raises:
            OSError: If the snapshot directory itself cannot be created
        """
        created_at = self._clock()
        path = self.backups_dir / f"{SNAPSHOT_PREFIX}{created_at.strftime(TIMESTAMP_FORMAT)}"
        path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Backup directory: {path}")

        snapshot = BackupSnapshot(path=path, created_at=created_at)
        for source, name in self.plan(targets, extra_files):
            snapshot.entries.append(self._copy(source, path / name))

        logger.info(f"{snapshot.files_captured} file(s) backed up to {path}")
        return snapshot

    def list_snapshots(self) -> list[Path]:
        """Existing snapshot directories, newest first."""
        if not self.backups_dir.is_dir():
            return []
        snapshots = [
            p
            for p in self.backups_dir.iterdir()
            if p.is_dir() and p.name.startswith(SNAPSHOT_PREFIX)
        ]
        # Fixed-width timestamps sort chronologically by name
        return sorted(snapshots, key=lambda p: p.name, reverse=True)

    def _copy(self, source: Path, dest: Path) -> BackupEntry:
        if not source.exists():
            return BackupEntry(source=str(source), name=dest.name, status=BackupStatus.MISSING)
        try:
            shutil.copy2(source, dest)
        except OSError as e:
            logger.warning(f"Could not back up {source}: {e}")
            return BackupEntry(
                source=str(source), name=dest.name, status=BackupStatus.FAILED, error=str(e)
            )
        logger.debug(f"Backed up {source} -> {dest}")
        return BackupEntry(source=str(source), name=dest.name, status=BackupStatus.COPIED)
