"""
Pytest configuration and shared fixtures.

Provides an isolated home directory for the host applications, an isolated
data directory, and a config/resolver pair pointing at both.
"""

import json
from pathlib import Path
from typing import Any

import pytest

from session_center.core.config import SessionCenterConfig
from session_center.core.hooks import PlatformResolver

# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide a temporary home directory and point HOME at it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide a temporary data directory and point SESSION_CENTER_DATA_DIR at it."""
    data = tmp_path / "data"
    data.mkdir()
    monkeypatch.setenv("SESSION_CENTER_DATA_DIR", str(data))
    for var in (
        "SESSION_CENTER_HOOK_DENSITY",
        "SESSION_CENTER_ENABLED_CLIS",
        "SESSION_CENTER_PORT",
    ):
        monkeypatch.delenv(var, raising=False)
    return data


# ==============================================================================
# Config Fixtures
# ==============================================================================


@pytest.fixture
def config(home_dir: Path, data_dir: Path) -> SessionCenterConfig:
    """Config with every CLI enabled, rooted in the temp directories."""
    return SessionCenterConfig(
        enabled_clis=["claude", "gemini", "codex"],
        data_dir=data_dir,
        home_dir=home_dir,
    )


@pytest.fixture
def resolver(home_dir: Path, tmp_path: Path) -> PlatformResolver:
    """Linux resolver with the message queue under the temp directory."""
    tmp = tmp_path / "tmp"
    tmp.mkdir()
    return PlatformResolver(platform="linux", home=home_dir, env={}, tmp_dir=tmp)


# ==============================================================================
# Helpers
# ==============================================================================


def write_json(path: Path, data: Any) -> Path:
    """Write `data` as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))
