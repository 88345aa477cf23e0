"""
Typed exceptions for hook registration.

Only TemplateMissingError is fatal. ArtifactError is raised by the artifact
backends and localized to a single target by the registry.
"""

from __future__ import annotations

from pathlib import Path


class HookRegistryError(Exception):
    """Base exception for hook registration errors."""


class ArtifactError(HookRegistryError):
    """A configuration artifact exists but could not be parsed or written."""

    def __init__(self, path: Path, cause: str) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class TemplateMissingError(HookRegistryError):
    """A bundled hook script template is missing from the installation."""

    def __init__(self, template: Path) -> None:
        self.template = template
        super().__init__(f"Bundled hook template not found: {template}")
