"""
Hook service: install, uninstall and inspect hook registrations.

Wires the configuration, platform resolver, ownership classifier and registry
together for one run. The service is built once per invocation from an
explicit SessionCenterConfig.

Usage:
    >>> from session_center.core.services.hooks import HookService
    >>> service = HookService.from_config()
    >>> report = service.install()
    >>> for r in report.reconciles:
    ...     print(r.target, r.count(ReconcileAction.ADDED))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field

from session_center.core.config import SessionCenterConfig, load_config
from session_center.core.hooks.models import (
    HookDefinition,
    ReconcileMode,
    ReconcileReport,
    Target,
)
from session_center.core.hooks.ownership import OwnershipClassifier
from session_center.core.hooks.platform import PlatformResolver
from session_center.core.hooks.registry import HookRegistry
from session_center.core.hooks.scripts import (
    TEMPLATES_DIR,
    ScriptResult,
    deploy_scripts,
    verify_templates,
)

logger = logging.getLogger(__name__)


class InstallReport(BaseModel):
    """Result of an install run."""

    density: str
    scripts: list[ScriptResult] = Field(default_factory=list)
    reconciles: list[ReconcileReport] = Field(default_factory=list)
    dry_run: bool = False


class HookService:
    """
    Service for registering and removing hooks across host applications.

    Example:
        >>> service = HookService(load_config())
        >>> reports = service.uninstall()
    """

    def __init__(
        self,
        config: SessionCenterConfig,
        resolver: PlatformResolver | None = None,
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        """
        Initialize service with dependencies.

        Args:
            config: Settings for this run
            resolver: Platform resolver (defaults to the running platform)
            templates_dir: Directory holding the bundled hook templates
        """
        self.config = config
        self.resolver = resolver or PlatformResolver(home=config.home_dir)
        self.templates_dir = templates_dir
        self.classifier = OwnershipClassifier(
            source_id=config.source_id,
            command_pattern=config.command_pattern,
            script_markers=config.script_markers,
        )
        self.registry = HookRegistry(self.classifier)
        self.targets = self.resolver.build_targets()

    @classmethod
    def from_config(cls, config: SessionCenterConfig | None = None) -> HookService:
        """Create service from a config, loading it if not given."""
        return cls(config or load_config())

    def enabled_targets(self, clis: Iterable[str] | None = None) -> list[Target]:
        """Targets for the given CLIs (defaults to the configured ones)."""
        wanted = set(clis) if clis is not None else set(self.config.enabled_clis)
        return [target for target in self.targets if target.key in wanted]

    def definitions(self, targets: Iterable[Target], density: str) -> dict[str, HookDefinition]:
        """Desired registration per target key for the given density."""
        definitions: dict[str, HookDefinition] = {}
        for target in targets:
            definition = self.resolver.definition_for(target, density)
            if definition is not None:
                definitions[target.key] = definition
        return definitions

    def install(
        self,
        clis: Iterable[str] | None = None,
        density: str | None = None,
        dry_run: bool = False,
    ) -> InstallReport:
        """
        Deploy hook scripts and register hooks in every enabled target.

        Templates are verified before anything is written.

        Args:
            clis: Target keys to install into (defaults to config.enabled_clis)
            density: Hook density (defaults to config.hook_density)
            dry_run: Report what would change without writing

        Returns:
            InstallReport with script and reconcile results

        Raises:
            TemplateMissingError: If a bundled template is missing
        """
        density = density or self.config.hook_density
        targets = self.enabled_targets(clis)
        verify_templates(targets, self.templates_dir)

        report = InstallReport(density=density, dry_run=dry_run)
        if not dry_run:
            for target in targets:
                report.scripts.extend(
                    deploy_scripts(
                        target,
                        self.templates_dir,
                        make_executable=not self.resolver.is_windows,
                    )
                )

        report.reconciles = self.registry.reconcile_all(
            targets,
            self.definitions(targets, density),
            ReconcileMode.INSTALL,
            dry_run=dry_run,
        )
        logger.info(f"Install finished for {len(targets)} target(s) (density: {density})")
        return report

    def uninstall(self, dry_run: bool = False) -> list[ReconcileReport]:
        """Remove our registrations from every known target, enabled or not."""
        return self.registry.reconcile_all(
            self.targets, {}, ReconcileMode.UNINSTALL, dry_run=dry_run
        )

    def status(self, density: str | None = None) -> list[ReconcileReport]:
        """What an install would do right now, without writing anything."""
        density = density or self.config.hook_density
        targets = self.enabled_targets()
        return self.registry.reconcile_all(
            targets,
            self.definitions(targets, density),
            ReconcileMode.INSTALL,
            dry_run=True,
        )
