"""
Tests for backup snapshots.

Tests cover:
- Snapshot naming and file layout
- Missing files skipped, failed copies recorded without stopping the pass
- Listing existing snapshots newest first
"""

import shutil
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import write_json
from session_center.core.backup import BackupManager, BackupStatus
from session_center.core.hooks import PlatformResolver, Target


def fixed_clock(year: int = 2026, second: int = 5):
    return lambda: datetime(year, 3, 14, 9, 26, second)


@pytest.fixture
def targets(resolver: PlatformResolver) -> list[Target]:
    return resolver.build_targets()


class TestSnapshot:
    """Tests for BackupManager.snapshot."""

    def test_snapshot_directory_name(self, tmp_path: Path, targets: list[Target]) -> None:
        manager = BackupManager(tmp_path / "backups", clock=fixed_clock())

        snapshot = manager.snapshot(targets)

        assert snapshot.path == tmp_path / "backups" / "reset-2026-03-14_09-26-05"
        assert snapshot.path.is_dir()
        assert snapshot.created_at == datetime(2026, 3, 14, 9, 26, 5)

    def test_copies_existing_files_only(
        self, tmp_path: Path, targets: list[Target], data_dir: Path
    ) -> None:
        claude, _, codex = targets
        write_json(claude.artifact_path, {"hooks": {}})
        codex.hooks_dir.mkdir(parents=True)
        (codex.hooks_dir / "dashboard-hook.sh").write_text("# AI Agent Session Center\n")
        state = data_dir / "sessions.db"
        state.write_bytes(b"SQLite format 3\x00")
        manager = BackupManager(tmp_path / "backups", clock=fixed_clock())

        snapshot = manager.snapshot(targets, [state, data_dir / "server-config.json"])

        assert snapshot.files_captured == 3
        assert sorted(p.name for p in snapshot.path.iterdir()) == [
            "claude-settings.json",
            "codex-dashboard-hook.sh",
            "sessions.db",
        ]
        assert (snapshot.path / "sessions.db").read_bytes() == b"SQLite format 3\x00"
        missing = [e for e in snapshot.entries if e.status == BackupStatus.MISSING]
        assert "server-config.json" in {e.name for e in missing}

    def test_failed_copy_does_not_stop_pass(self, tmp_path: Path, targets: list[Target]) -> None:
        claude, gemini, _ = targets
        write_json(claude.artifact_path, {})
        write_json(gemini.artifact_path, {})
        manager = BackupManager(tmp_path / "backups", clock=fixed_clock())

        real_copy2 = shutil.copy2

        def flaky_copy(src, dst, *args, **kwargs):
            if Path(src) == claude.artifact_path:
                raise PermissionError("denied")
            return real_copy2(src, dst, *args, **kwargs)

        with patch("session_center.core.backup.shutil.copy2", side_effect=flaky_copy):
            snapshot = manager.snapshot(targets)

        assert [e.source for e in snapshot.failures] == [str(claude.artifact_path)]
        assert snapshot.failures[0].error == "denied"
        assert (snapshot.path / "gemini-settings.json").exists()
        assert snapshot.files_captured == 1

    def test_plan_lists_state_files_first(self, tmp_path: Path, targets: list[Target]) -> None:
        state = tmp_path / "server-config.json"
        plan = BackupManager(tmp_path).plan(targets, [state])

        assert plan[0] == (state, "server-config.json")
        names = [name for _, name in plan]
        assert "claude-dashboard-hook.ps1" in names
        assert "gemini-settings.json" in names
        assert "codex-config.toml" in names


class TestListSnapshots:
    """Tests for BackupManager.list_snapshots."""

    def test_no_backups_dir(self, tmp_path: Path) -> None:
        assert BackupManager(tmp_path / "missing").list_snapshots() == []

    def test_newest_first(self, tmp_path: Path, targets: list[Target]) -> None:
        backups = tmp_path / "backups"
        BackupManager(backups, clock=fixed_clock(second=1)).snapshot(targets)
        BackupManager(backups, clock=fixed_clock(year=2027)).snapshot(targets)
        BackupManager(backups, clock=fixed_clock(second=9)).snapshot(targets)
        (backups / "notes.txt").write_text("not a snapshot")
        (backups / "manual-copy").mkdir()

        names = [p.name for p in BackupManager(backups).list_snapshots()]

        assert names == [
            "reset-2027-03-14_09-26-05",
            "reset-2026-03-14_09-26-09",
            "reset-2026-03-14_09-26-01",
        ]
