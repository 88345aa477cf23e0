"""
Hook registry: reconciles our hook registrations against host configuration.

For each target the registry loads the configuration artifact, partitions
every fragment into owned and foreign using the OwnershipClassifier, and then
adds, updates or removes only the owned fragments. Foreign fragments are never
modified, reordered or dropped, and event keys outside the target's known
vocabulary are never touched.

Reconciling is idempotent: re-applying install or uninstall to an artifact
that is already in the desired state reports no changes and does not rewrite
the file.

Usage:
    >>> registry = HookRegistry(OwnershipClassifier())
    >>> report = registry.reconcile(target, definition, ReconcileMode.INSTALL)
    >>> report.count(ReconcileAction.ADDED)
    3
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from session_center.core.hooks.artifacts import (
    JsonEventGroupsArtifact,
    TomlLinesArtifact,
    open_artifact,
)
from session_center.core.hooks.errors import ArtifactError
from session_center.core.hooks.models import (
    ArtifactFormat,
    EventReport,
    HookDefinition,
    HookGroup,
    PreservedFragment,
    ReconcileAction,
    ReconcileMode,
    ReconcileReport,
    Target,
)
from session_center.core.hooks.ownership import OwnershipClassifier

logger = logging.getLogger(__name__)


class HookRegistry:
    """
    Reconciles hook registrations for a set of targets.

    Example:
        >>> registry = HookRegistry(OwnershipClassifier())
        >>> reports = registry.reconcile_all(targets, {}, ReconcileMode.UNINSTALL)
        >>> sum(r.count(ReconcileAction.REMOVED) for r in reports)
        12
    """

    def __init__(self, classifier: OwnershipClassifier) -> None:
        self.classifier = classifier

    def reconcile(
        self,
        target: Target,
        definition: HookDefinition | None,
        mode: ReconcileMode,
        dry_run: bool = False,
    ) -> ReconcileReport:
        """
        Bring one target's artifact into agreement with the desired state.

        Args:
            target: Host application to reconcile
            definition: Desired registration (required to install into JSON targets)
            mode: Install or uninstall
            dry_run: Compute the report without writing the artifact

        Returns:
            ReconcileReport describing every action taken

        Raises:
            ArtifactError: If the artifact exists but is malformed or cannot
                be written
            ValueError: If a JSON target is installed without a definition
        """
        if (
            mode == ReconcileMode.INSTALL
            and definition is None
            and target.format == ArtifactFormat.JSON_EVENT_GROUPS
        ):
            raise ValueError(f"No hook definition given for {target.name}")

        report = ReconcileReport(
            target=target.name,
            mode=mode,
            artifact_path=str(target.artifact_path),
            dry_run=dry_run,
        )
        artifact = open_artifact(target)
        if isinstance(artifact, TomlLinesArtifact):
            self._reconcile_lines(target, artifact, mode, report)
        else:
            self._reconcile_groups(target, artifact, definition, mode, report)
        return report

    def reconcile_all(
        self,
        targets: Sequence[Target],
        definitions: Mapping[str, HookDefinition],
        mode: ReconcileMode,
        dry_run: bool = False,
    ) -> list[ReconcileReport]:
        """
        Reconcile every target, isolating failures to the target concerned.

        A malformed artifact becomes a warning on that target's report and
        processing continues with the next target.

        Args:
            targets: Targets to reconcile, in order
            definitions: Desired registration per target key (install mode)
            mode: Install or uninstall
            dry_run: Compute reports without writing

        Returns:
            One report per target, in the same order
        """
        reports: list[ReconcileReport] = []
        for target in targets:
            definition = definitions.get(target.key)
            if (
                mode == ReconcileMode.INSTALL
                and definition is None
                and target.format == ArtifactFormat.JSON_EVENT_GROUPS
            ):
                report = ReconcileReport(
                    target=target.name,
                    mode=mode,
                    artifact_path=str(target.artifact_path),
                    dry_run=dry_run,
                )
                report.notes.append(f"No hook definition for {target.name}, skipping")
                reports.append(report)
                continue

            try:
                reports.append(self.reconcile(target, definition, mode, dry_run=dry_run))
            except ArtifactError as e:
                logger.warning(f"Skipping {target.name}: {e}")
                report = ReconcileReport(
                    target=target.name,
                    mode=mode,
                    artifact_path=str(target.artifact_path),
                    dry_run=dry_run,
                )
                report.warnings.append(f"Could not process {target.name} settings: {e.cause}")
                reports.append(report)
        return reports

    # ------------------------------------------------------------------
    # JSON event groups
    # ------------------------------------------------------------------

    def _reconcile_groups(
        self,
        target: Target,
        artifact: JsonEventGroupsArtifact,
        definition: HookDefinition | None,
        mode: ReconcileMode,
        report: ReconcileReport,
    ) -> None:
        if not artifact.exists():
            if mode == ReconcileMode.UNINSTALL:
                report.notes.append(f"{target.name} settings not found, skipping")
                return
            report.notes.append(f"Creating new settings file {artifact.path}")

        document = artifact.load()
        had_hooks = "hooks" in document
        hooks: dict[str, Any] = document.get("hooks") or {}
        wanted = set(definition.events) if definition and mode == ReconcileMode.INSTALL else set()
        modified = False

        for event in target.events:
            existing = hooks.get(event, [])
            if not isinstance(existing, list):
                report.events.append(
                    EventReport(
                        event=event,
                        action=ReconcileAction.SKIPPED,
                        count=0,
                        detail="event value is not a list, left untouched",
                    )
                )
                continue

            groups = [HookGroup.parse(raw) for raw in existing]
            owned = [i for i, group in enumerate(groups) if self.classifier.is_owned_group(group)]

            if event in wanted and definition is not None:
                new_list, event_report = self._install_event(
                    event, existing, groups, owned, definition
                )
            else:
                new_list, event_report = self._remove_event(event, existing, groups, owned)

            if event_report is not None:
                report.events.append(event_report)
                logger.info(f"[{target.name}] {event}: {event_report.action.value}")

            for i, group in enumerate(groups):
                if i not in owned:
                    report.preserved.append(PreservedFragment(event=event, commands=group.commands))

            if new_list is None:
                continue
            modified = True
            if new_list:
                hooks[event] = new_list
            else:
                # Dropped only because our removal emptied it
                hooks.pop(event, None)

        if not modified:
            return

        if hooks:
            document["hooks"] = hooks
        elif had_hooks:
            del document["hooks"]

        if not report.dry_run:
            artifact.save(document)
            report.written = True

    def _install_event(
        self,
        event: str,
        existing: list[Any],
        groups: list[HookGroup],
        owned: list[int],
        definition: HookDefinition,
    ) -> tuple[list[Any] | None, EventReport]:
        source_id = self.classifier.source_id
        if not owned:
            new_group = definition.group_for(event, source_id)
            return [*existing, new_group], EventReport(event=event, action=ReconcileAction.ADDED)

        first, duplicates = owned[0], set(owned[1:])
        updated = groups[first].with_registration(
            source_id, definition.hooks_for(event), self.classifier.command_pattern
        )
        if updated == existing[first] and not duplicates:
            return None, EventReport(event=event, action=ReconcileAction.ALREADY_REGISTERED)

        new_list = []
        for i, raw in enumerate(existing):
            if i == first:
                new_list.append(updated)
            elif i not in duplicates:
                new_list.append(raw)
        detail = f"removed {len(duplicates)} duplicate group(s)" if duplicates else None
        return new_list, EventReport(event=event, action=ReconcileAction.UPDATED, detail=detail)

    def _remove_event(
        self,
        event: str,
        existing: list[Any],
        groups: list[HookGroup],
        owned: list[int],
    ) -> tuple[list[Any] | None, EventReport | None]:
        if not owned:
            return None, None

        dropped = set(owned)
        sources = {groups[i].source for i in owned if groups[i].source}
        new_list = [raw for i, raw in enumerate(existing) if i not in dropped]
        detail = f"source: {', '.join(sorted(sources))}" if sources else None
        return new_list, EventReport(
            event=event, action=ReconcileAction.REMOVED, count=len(owned), detail=detail
        )

    # ------------------------------------------------------------------
    # TOML lines
    # ------------------------------------------------------------------

    def _reconcile_lines(
        self,
        target: Target,
        artifact: TomlLinesArtifact,
        mode: ReconcileMode,
        report: ReconcileReport,
    ) -> None:
        if mode == ReconcileMode.INSTALL:
            report.events.append(
                EventReport(
                    event="notify",
                    action=ReconcileAction.SKIPPED,
                    count=0,
                    detail=f"install is not supported for {artifact.format.value} artifacts",
                )
            )
            report.notes.append(f"{target.name} registration is managed outside this tool")
            return

        if not artifact.exists():
            report.notes.append(f"{target.name} config not found, skipping")
            return

        kept: list[str] = []
        removed: list[str] = []
        for line in artifact.load():
            if self.classifier.is_owned_line(line):
                removed.append(line)
            else:
                kept.append(line)

        report.removed_lines = [line.strip() for line in removed]
        report.lines_removed = len(removed)
        report.lines_preserved = sum(1 for line in kept if line.strip())

        if not removed:
            return

        report.events.append(
            EventReport(event="notify", action=ReconcileAction.REMOVED, count=len(removed))
        )
        logger.info(f"[{target.name}] removed {len(removed)} line(s)")
        if not report.dry_run:
            artifact.save(kept)
            report.written = True
