"""
Tests for the reset and backups commands.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from conftest import read_json, write_json
from session_center.cli import app
from session_center.cli.errors import ExitCode
from session_center.core.hooks import PlatformResolver

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_mq_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep reset away from the real message-queue directory."""
    mq_dir = tmp_path / "mq" / "claude-session-center"
    monkeypatch.setattr(PlatformResolver, "mq_dir", property(lambda self: mq_dir))
    return mq_dir


@pytest.fixture
def installed_home(home_dir: Path, data_dir: Path) -> Path:
    result = runner.invoke(app, ["hooks", "install"])
    assert result.exit_code == 0
    (data_dir / "sessions.db").write_bytes(b"SQLite format 3\x00")
    return home_dir


class TestReset:
    """Tests for `session-center reset`."""

    @patch("httpx.post", side_effect=httpx.ConnectError("Connection refused"))
    def test_reset_with_yes(
        self, mock_post: MagicMock, installed_home: Path, data_dir: Path
    ) -> None:
        result = runner.invoke(app, ["reset", "--yes"])

        assert result.exit_code == 0
        assert "Full Reset" in result.output
        assert "[1/6]" in result.output
        assert "Reset complete" in result.output
        assert "Server not running" in result.output
        assert read_json(installed_home / ".claude" / "settings.json") == {}
        assert not (installed_home / ".claude" / "hooks" / "dashboard-hook.sh").exists()
        assert not (data_dir / "sessions.db").exists()

        snapshots = list((data_dir / "backups").iterdir())
        assert len(snapshots) == 1
        assert (snapshots[0] / "sessions.db").exists()
        assert (snapshots[0] / "claude-settings.json").exists()

    @patch("httpx.post")
    def test_reset_signal_sent(
        self, mock_post: MagicMock, installed_home: Path, data_dir: Path
    ) -> None:
        mock_post.return_value = httpx.Response(200)

        result = runner.invoke(app, ["reset", "-y"])

        assert result.exit_code == 0
        assert "Sent clearBrowserDb signal" in result.output

    @patch("httpx.post")
    def test_reset_cancelled(
        self, mock_post: MagicMock, installed_home: Path, data_dir: Path
    ) -> None:
        result = runner.invoke(app, ["reset"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert (installed_home / ".claude" / "hooks" / "dashboard-hook.sh").exists()
        assert not (data_dir / "backups").exists()
        mock_post.assert_not_called()

    @patch("httpx.post")
    def test_reset_dry_run(
        self, mock_post: MagicMock, installed_home: Path, data_dir: Path
    ) -> None:
        before = (installed_home / ".claude" / "settings.json").read_bytes()

        result = runner.invoke(app, ["reset", "--dry-run"])

        assert result.exit_code == 0
        assert "Would back up" in result.output
        assert "Dry run - no changes made" in result.output
        assert (installed_home / ".claude" / "settings.json").read_bytes() == before
        assert (data_dir / "sessions.db").exists()
        mock_post.assert_not_called()

    @patch("httpx.post")
    def test_reset_aborts_without_backup(
        self, mock_post: MagicMock, installed_home: Path, data_dir: Path
    ) -> None:
        (data_dir / "backups").write_text("not a directory")
        settings = installed_home / ".claude" / "settings.json"
        before = settings.read_bytes()

        result = runner.invoke(app, ["reset", "--yes"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Could not create backup directory" in result.output
        assert "Reset aborted" in result.output
        assert "[2/6]" not in result.output
        assert "Reset complete" not in result.output
        assert settings.read_bytes() == before
        assert (installed_home / ".claude" / "hooks" / "dashboard-hook.sh").exists()
        assert (data_dir / "sessions.db").exists()
        mock_post.assert_not_called()

    @patch("httpx.post", side_effect=httpx.ConnectError("Connection refused"))
    def test_reset_preserves_foreign_script(
        self, mock_post: MagicMock, home_dir: Path, data_dir: Path
    ) -> None:
        script = home_dir / ".codex" / "hooks" / "dashboard-hook.sh"
        script.parent.mkdir(parents=True)
        script.write_text("#!/bin/bash\necho 'someone else'\n")
        write_json(home_dir / ".claude" / "settings.json", {"model": "opus"})

        result = runner.invoke(app, ["reset", "--yes"])

        assert result.exit_code == 0
        assert "SKIPPED" in result.output
        assert script.exists()
        assert read_json(home_dir / ".claude" / "settings.json") == {"model": "opus"}


class TestBackups:
    """Tests for `session-center backups`."""

    def test_no_backups(self, home_dir: Path, data_dir: Path) -> None:
        result = runner.invoke(app, ["backups"])

        assert result.exit_code == 0
        assert "No backups" in result.output

    @patch("httpx.post", side_effect=httpx.ConnectError("Connection refused"))
    def test_lists_snapshot_after_reset(
        self, mock_post: MagicMock, installed_home: Path, data_dir: Path
    ) -> None:
        runner.invoke(app, ["reset", "--yes"])

        result = runner.invoke(app, ["backups"])

        assert result.exit_code == 0
        assert "reset-" in result.output
        assert "claude-settings.json" in result.output
