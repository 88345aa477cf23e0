"""
.env support for SESSION_CENTER_* overrides.

Only keys carrying the SESSION_CENTER_ prefix are taken from .env files;
anything else a shared .env holds (API keys, other tools' settings) is left
out of the process environment. Files are read lowest precedence first:

    ~/.config/session-center/.env  <  ./.env  <  ./.env.local  <  shell

A value already exported in the shell is never replaced.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, MutableMapping
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_PREFIX = "SESSION_CENTER_"


def default_env_files(cwd: Path | None = None) -> list[Path]:
    """The .env files consulted at startup, lowest precedence first."""
    config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    cwd = cwd or Path.cwd()
    return [config_home / "session-center" / ".env", cwd / ".env", cwd / ".env.local"]


def read_env_overrides(paths: Iterable[Path]) -> dict[str, str]:
    """
    Collect SESSION_CENTER_* assignments from .env files.

    Missing files are ignored. A later file wins over an earlier one, and a
    key declared without a value (``KEY`` alone on a line) is skipped.
    """
    overrides: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(ENV_PREFIX):
                overrides[key] = value
        logger.debug(f"Read env overrides from {path}")
    return overrides


def load_env_overrides(
    paths: Iterable[Path] | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Export .env overrides into the environment read by load_config().

    Args:
        paths: .env files to read (defaults to default_env_files())
        environ: Mapping to update (defaults to os.environ)

    Returns:
        The keys and values that were actually exported
    """
    target = os.environ if environ is None else environ
    overrides = read_env_overrides(default_env_files() if paths is None else paths)

    exported = {key: value for key, value in overrides.items() if key not in target}
    target.update(exported)
    return exported
