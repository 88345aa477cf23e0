"""
Hook registration for Claude Code, Gemini CLI and Codex CLI.

Installs, upgrades in place and safely removes our hook registrations in host
application configuration files without touching anything we did not create.

Key Classes:
    OwnershipClassifier: Decides which configuration fragments are ours
    HookRegistry: Reconciles a target's artifact with the desired state
    PlatformResolver: Resolves commands, script names and targets

Architecture:
    - Non-destructive: foreign hook groups and lines are preserved verbatim
    - Idempotent: re-running install or uninstall reports no changes
    - Isolated failures: a malformed artifact only skips that target

Usage:
    from session_center.core.hooks import HookRegistry, OwnershipClassifier

    registry = HookRegistry(OwnershipClassifier())
    reports = registry.reconcile_all(targets, definitions, ReconcileMode.INSTALL)
    for report in reports:
        print(report.target, report.count(ReconcileAction.ADDED))
"""

from session_center.core.hooks.artifacts import (
    JsonEventGroupsArtifact,
    TomlLinesArtifact,
    open_artifact,
)
from session_center.core.hooks.errors import (
    ArtifactError,
    HookRegistryError,
    TemplateMissingError,
)
from session_center.core.hooks.models import (
    ArtifactFormat,
    EventReport,
    HookDefinition,
    HookDescriptor,
    HookGroup,
    PreservedFragment,
    ReconcileAction,
    ReconcileMode,
    ReconcileReport,
    Target,
)
from session_center.core.hooks.ownership import OwnershipClassifier
from session_center.core.hooks.platform import PlatformResolver
from session_center.core.hooks.registry import HookRegistry
from session_center.core.hooks.scripts import (
    ScriptResult,
    ScriptStatus,
    deploy_scripts,
    remove_owned_script,
    remove_target_scripts,
    verify_templates,
)

__all__ = [
    # Artifacts
    "JsonEventGroupsArtifact",
    "TomlLinesArtifact",
    "open_artifact",
    # Errors
    "ArtifactError",
    "HookRegistryError",
    "TemplateMissingError",
    # Models
    "ArtifactFormat",
    "EventReport",
    "HookDefinition",
    "HookDescriptor",
    "HookGroup",
    "PreservedFragment",
    "ReconcileAction",
    "ReconcileMode",
    "ReconcileReport",
    "Target",
    # Reconciliation
    "HookRegistry",
    "OwnershipClassifier",
    "PlatformResolver",
    # Scripts
    "ScriptResult",
    "ScriptStatus",
    "deploy_scripts",
    "remove_owned_script",
    "remove_target_scripts",
    "verify_templates",
]
