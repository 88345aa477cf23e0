"""
Agent Session Center - hook registration manager

Registers and safely removes the dashboard's hook callbacks in the
configuration files of Claude Code, Gemini CLI and Codex CLI.
"""

__version__ = "0.4.0"

# Re-export core models for convenience
from session_center.core.config.models import SessionCenterConfig
from session_center.core.hooks.models import ArtifactFormat, HookDefinition, Target

__all__ = ["ArtifactFormat", "HookDefinition", "SessionCenterConfig", "Target", "__version__"]
