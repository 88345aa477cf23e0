"""
Configuration models and loading.

This module provides the Pydantic model for session-center configuration
with layered overrides: defaults < server-config.json < env vars.
"""

from .loader import (
    get_data_dir,
    get_xdg_data_home,
    load_config,
)
from .models import KNOWN_CLIS, SessionCenterConfig

__all__ = [
    # Models
    "KNOWN_CLIS",
    "SessionCenterConfig",
    # Loader functions
    "get_data_dir",
    "get_xdg_data_home",
    "load_config",
]
