"""
Services that orchestrate one install or reset run.

    HookService: install, uninstall and status of hook registrations
    ResetService: backup, uninstall, script removal, data cleanup, browser signal
"""

from session_center.core.services.hooks import HookService, InstallReport
from session_center.core.services.reset import (
    BrowserSignal,
    CleanupResult,
    CleanupStatus,
    ResetReport,
    ResetService,
    SignalStatus,
)

__all__ = [
    "BrowserSignal",
    "CleanupResult",
    "CleanupStatus",
    "HookService",
    "InstallReport",
    "ResetReport",
    "ResetService",
    "SignalStatus",
]
