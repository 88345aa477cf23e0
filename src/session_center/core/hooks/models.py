"""
Hook registration data models.

Defines the targets (host applications whose configuration we register hooks
into), the desired hook definition per target, the tolerant intermediate
representation of JSON hook groups, and the reports produced by reconciling a
target's configuration artifact.

Hook groups are parsed from loosely-typed JSON. The parser never fails on an
unexpected shape: anything it does not understand is kept as opaque
pass-through data, classified as foreign, and written back unchanged.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Key used to mark hook groups created by this tool. "source" is accepted on read.
MARKER_KEY = "_source"
MARKER_KEYS = (MARKER_KEY, "source")


class ArtifactFormat(str, Enum):
    """On-disk format of a target's configuration artifact."""

    JSON_EVENT_GROUPS = "json-event-groups"
    TOML_LINES = "toml-lines"


class ReconcileMode(str, Enum):
    """Whether a reconcile run registers or removes our hooks."""

    INSTALL = "install"
    UNINSTALL = "uninstall"


class ReconcileAction(str, Enum):
    """Action taken for one event (or one artifact) during reconcile."""

    ADDED = "added"
    UPDATED = "updated"
    ALREADY_REGISTERED = "already registered"
    REMOVED = "removed"
    SKIPPED = "skipped"


class Target(BaseModel):
    """
    One host application's configuration surface.

    The event vocabulary is closed: event keys in the artifact that are not
    listed here are never read or modified.
    """

    key: str = Field(description="Short identifier: 'claude', 'gemini', 'codex'")
    name: str = Field(description="Display name: 'Claude', 'Gemini', 'Codex'")
    artifact_path: Path = Field(description="Path to the host's configuration artifact")
    format: ArtifactFormat = Field(description="Artifact format")
    events: list[str] = Field(
        default_factory=list, description="Event names this host recognizes, in order"
    )
    hooks_dir: Path = Field(description="Directory the hook script is deployed into")
    script_names: list[str] = Field(
        default_factory=list,
        description="Every deployed script filename this target may own",
    )
    templates: dict[str, str] = Field(
        default_factory=dict,
        description="Deployed script filename -> bundled template filename (this platform)",
    )


class HookDescriptor(BaseModel):
    """A single hook registration: {type, command, async}."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "command"
    command: str
    async_: bool | None = Field(default=None, alias="async")

    def to_raw(self) -> dict[str, Any]:
        """Serialize to the host's JSON shape, omitting async when unset."""
        raw: dict[str, Any] = {"type": self.type, "command": self.command}
        if self.async_ is not None:
            raw["async"] = self.async_
        return raw


class HookGroup(BaseModel):
    """
    Intermediate representation of one hook group attached to an event.

    `raw` holds the group exactly as loaded so that foreign groups round-trip
    untouched. `opaque` is set when the value is not a mapping at all.
    """

    source: str | None = None
    hooks: list[HookDescriptor] = Field(default_factory=list)
    raw: Any = None
    opaque: bool = False

    @classmethod
    def parse(cls, raw: Any) -> HookGroup:
        """Build a group from raw JSON, tolerating any shape."""
        if not isinstance(raw, dict):
            return cls(raw=raw, opaque=True)

        source = None
        for key in MARKER_KEYS:
            value = raw.get(key)
            if isinstance(value, str):
                source = value
                break

        hooks: list[HookDescriptor] = []
        raw_hooks = raw.get("hooks")
        if isinstance(raw_hooks, list):
            for entry in raw_hooks:
                if not isinstance(entry, dict) or not isinstance(entry.get("command"), str):
                    continue
                hook_type = entry.get("type")
                is_async = entry.get("async")
                hooks.append(
                    HookDescriptor(
                        type=hook_type if isinstance(hook_type, str) else "command",
                        command=entry["command"],
                        async_=is_async if isinstance(is_async, bool) else None,
                    )
                )

        return cls(source=source, hooks=hooks, raw=raw)

    @property
    def commands(self) -> list[str]:
        return [hook.command for hook in self.hooks]

    def with_registration(
        self,
        source_id: str,
        hooks: list[dict[str, Any]],
        command_pattern: str | None = None,
    ) -> dict[str, Any]:
        """
        Return this group's raw mapping carrying our marker and hooks.

        Keys other than the marker and `hooks` (e.g. `matcher`) are kept in
        place. When `command_pattern` is given, only the descriptors whose
        command contains it are replaced: ours go where the first of them
        stood and every other descriptor keeps its position. A group with
        no matching descriptor has its `hooks` list replaced outright.

        The result equals `raw` when nothing needs to change.
        """
        updated = dict(self.raw) if isinstance(self.raw, dict) else {}
        if self.source != source_id:
            updated[MARKER_KEY] = source_id

        raw_hooks = updated.get("hooks")
        if not command_pattern or not isinstance(raw_hooks, list):
            updated["hooks"] = hooks
            return updated

        merged: list[Any] = []
        matched = False
        for entry in raw_hooks:
            command = entry.get("command") if isinstance(entry, dict) else None
            if isinstance(command, str) and command_pattern in command:
                if not matched:
                    merged.extend(hooks)
                    matched = True
                continue
            merged.append(entry)

        updated["hooks"] = merged if matched else hooks
        return updated


class HookDefinition(BaseModel):
    """
    The registration we want in a target.

    `command` may contain an ``{event}`` placeholder, replaced per event
    (Gemini receives the event name as the script's first argument).
    """

    model_config = ConfigDict(populate_by_name=True)

    command: str
    events: list[str] = Field(default_factory=list)
    async_: bool | None = Field(default=None, alias="async")

    def command_for(self, event: str) -> str:
        return self.command.replace("{event}", event)

    def hooks_for(self, event: str) -> list[dict[str, Any]]:
        descriptor = HookDescriptor(command=self.command_for(event), async_=self.async_)
        return [descriptor.to_raw()]

    def group_for(self, event: str, source_id: str) -> dict[str, Any]:
        """A brand new owned group for `event`, marker first."""
        return {MARKER_KEY: source_id, "hooks": self.hooks_for(event)}


class EventReport(BaseModel):
    """What happened to one event during reconcile."""

    event: str
    action: ReconcileAction
    count: int = Field(default=1, description="Number of groups affected")
    detail: str | None = None


class PreservedFragment(BaseModel):
    """A foreign hook group left in place, kept for auditing."""

    event: str
    commands: list[str] = Field(default_factory=list)


class ReconcileReport(BaseModel):
    """Result of reconciling one target's artifact."""

    target: str = Field(description="Target display name")
    mode: ReconcileMode
    artifact_path: str
    events: list[EventReport] = Field(default_factory=list)
    preserved: list[PreservedFragment] = Field(default_factory=list)
    lines_removed: int = 0
    removed_lines: list[str] = Field(default_factory=list)
    lines_preserved: int = 0
    warnings: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    written: bool = Field(default=False, description="Whether the artifact was rewritten")
    dry_run: bool = False

    def count(self, action: ReconcileAction) -> int:
        """Total groups affected by `action` across all events."""
        return sum(report.count for report in self.events if report.action == action)

    @property
    def changed(self) -> bool:
        return any(
            report.action
            in (ReconcileAction.ADDED, ReconcileAction.UPDATED, ReconcileAction.REMOVED)
            for report in self.events
        ) or self.lines_removed > 0

    @property
    def failed(self) -> bool:
        return bool(self.warnings)
