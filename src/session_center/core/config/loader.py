"""
Configuration loading with layered overrides.

Implements the configuration precedence chain:
    defaults < <data_dir>/server-config.json < env vars

Unlike a cached global, load_config() builds a fresh SessionCenterConfig on
every call; callers construct it once per run and pass it along.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import SessionCenterConfig

logger = logging.getLogger(__name__)


def get_xdg_data_home() -> Path:
    """
    Get XDG data home directory.

    Returns:
        Path to data directory (defaults to ~/.local/share)
    """
    if xdg_home := os.environ.get("XDG_DATA_HOME"):
        return Path(xdg_home)
    return Path.home() / ".local" / "share"


def get_data_dir() -> Path:
    """
    Get the directory holding persisted state and backups.

    SESSION_CENTER_DATA_DIR wins over the XDG location.

    Returns:
        Path to the data directory (may not exist yet)
    """
    if data_dir := os.environ.get("SESSION_CENTER_DATA_DIR"):
        return Path(data_dir).expanduser()
    return get_xdg_data_home() / "session-center"


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring config at {path}: not a JSON object")
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config must never block an install or reset
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        SESSION_CENTER_HOOK_DENSITY - overrides hook_density (high|medium|low)
        SESSION_CENTER_ENABLED_CLIS - overrides enabled_clis (comma-separated)
        SESSION_CENTER_PORT - overrides port

    Invalid values are reported and ignored.

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if density := os.environ.get("SESSION_CENTER_HOOK_DENSITY"):
        density = density.strip().lower()
        if density in ("high", "medium", "low"):
            result["hook_density"] = density
        else:
            logger.warning(f"Invalid SESSION_CENTER_HOOK_DENSITY value '{density}', ignoring")

    if clis := os.environ.get("SESSION_CENTER_ENABLED_CLIS"):
        result["enabled_clis"] = [name.strip() for name in clis.split(",") if name.strip()]

    if port_str := os.environ.get("SESSION_CENTER_PORT"):
        try:
            result["port"] = int(port_str)
        except ValueError:
            logger.warning(f"Invalid SESSION_CENTER_PORT value '{port_str}', ignoring")

    return result


def _normalize_keys(file_config: dict[str, Any]) -> dict[str, Any]:
    """Map the dashboard's camelCase keys onto field names."""
    aliases = {"hookDensity": "hook_density", "enabledClis": "enabled_clis"}
    return {aliases.get(key, key): value for key, value in file_config.items()}


def load_config(
    data_dir: Path | None = None,
    home_dir: Path | None = None,
) -> SessionCenterConfig:
    """
    Load configuration with layered overrides.

    Configuration precedence (highest to lowest):
        1. Environment variables (SESSION_CENTER_*)
        2. Dashboard config (<data_dir>/server-config.json)
        3. Hardcoded defaults

    A config that fails validation is reported and replaced by defaults.

    Args:
        data_dir: Data directory (defaults to get_data_dir())
        home_dir: Home directory of the host applications (defaults to ~)

    Returns:
        Validated SessionCenterConfig instance

    Example:
        >>> config = load_config()
        >>> config.hook_density
        'medium'
    """
    if data_dir is None:
        data_dir = get_data_dir()

    base: dict[str, Any] = {"data_dir": data_dir}
    if home_dir is not None:
        base["home_dir"] = home_dir

    merged = dict(base)
    if file_config := load_json_file(data_dir / "server-config.json"):
        merged.update(_normalize_keys(file_config))
        merged.update(base)

    merged = apply_env_overrides(merged)

    try:
        return SessionCenterConfig.model_validate(merged)
    except ValidationError as e:
        logger.warning(f"Invalid configuration, using defaults: {e}")
        return SessionCenterConfig.model_validate(base)
