"""
Platform-specific paths and commands for hook registration.

Resolves, for the running platform, the hook script filenames, the command
string each host application should invoke, the message-queue directory, and
the full list of targets with their event vocabularies. The registry only
consumes what this module resolves; it never inspects the platform itself.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from session_center.core.hooks.models import ArtifactFormat, HookDefinition, Target

SCRIPT_NAME = "dashboard-hook.sh"
WINDOWS_SCRIPT_NAME = "dashboard-hook.ps1"
MQ_DIR_NAME = "claude-session-center"

CLAUDE_EVENTS = [
    "SessionStart",
    "UserPromptSubmit",
    "PreToolUse",
    "PostToolUse",
    "PostToolUseFailure",
    "PermissionRequest",
    "Stop",
    "Notification",
    "SubagentStart",
    "SubagentStop",
    "TeammateIdle",
    "TaskCompleted",
    "PreCompact",
    "SessionEnd",
]

GEMINI_EVENTS = [
    "SessionStart",
    "BeforeAgent",
    "BeforeTool",
    "AfterTool",
    "AfterAgent",
    "SessionEnd",
    "Notification",
]

# Event subsets installed per hook density
DENSITY_EVENTS: dict[str, dict[str, list[str]]] = {
    "claude": {
        "high": CLAUDE_EVENTS,
        "medium": [e for e in CLAUDE_EVENTS if e not in ("TeammateIdle", "PreCompact")],
        "low": ["SessionStart", "UserPromptSubmit", "PermissionRequest", "Stop", "SessionEnd"],
    },
    "gemini": {
        "high": GEMINI_EVENTS,
        "medium": ["SessionStart", "BeforeAgent", "AfterAgent", "SessionEnd", "Notification"],
        "low": ["SessionStart", "AfterAgent", "SessionEnd"],
    },
}


class PlatformResolver:
    """
    Resolves platform-dependent filenames, commands and paths.

    Example:
        >>> resolver = PlatformResolver(platform="linux", home=Path("/home/me"))
        >>> resolver.command_for("claude")
        '~/.claude/hooks/dashboard-hook.sh'
    """

    def __init__(
        self,
        platform: str | None = None,
        home: Path | None = None,
        env: Mapping[str, str] | None = None,
        tmp_dir: Path | None = None,
    ) -> None:
        self.platform = platform or sys.platform
        self.home = home if home is not None else Path.home()
        self.env = env if env is not None else os.environ
        self._tmp_dir = tmp_dir

    @property
    def is_windows(self) -> bool:
        return self.platform.startswith("win")

    @property
    def script_names(self) -> tuple[str, str]:
        """Both candidate Claude script filenames, one per OS family."""
        return (SCRIPT_NAME, WINDOWS_SCRIPT_NAME)

    @property
    def claude_script_name(self) -> str:
        return WINDOWS_SCRIPT_NAME if self.is_windows else SCRIPT_NAME

    @property
    def mq_dir(self) -> Path:
        """Temporary directory used by the file-based message queue."""
        if self._tmp_dir is not None:
            return self._tmp_dir / MQ_DIR_NAME
        if self.is_windows:
            temp = self.env.get("TEMP") or self.env.get("TMP") or "C:\\Temp"
            return Path(temp) / MQ_DIR_NAME
        return Path("/tmp") / MQ_DIR_NAME

    def command_for(self, target_key: str) -> str:
        """
        The command string a host application should run.

        Gemini's command carries an ``{event}`` placeholder because the
        script receives the event name as its first argument.
        """
        if target_key == "claude":
            if self.is_windows:
                return (
                    "powershell -NoProfile -ExecutionPolicy Bypass "
                    f'-File "~/.claude/hooks/{WINDOWS_SCRIPT_NAME}"'
                )
            return f"~/.claude/hooks/{SCRIPT_NAME}"
        if target_key == "gemini":
            return f"~/.gemini/hooks/{SCRIPT_NAME} {{event}}"
        if target_key == "codex":
            return f"~/.codex/hooks/{SCRIPT_NAME}"
        raise ValueError(f"Unknown target: {target_key}")

    def build_targets(self) -> list[Target]:
        """Every known target, in a stable order."""
        claude_dir = self.home / ".claude"
        gemini_dir = self.home / ".gemini"
        codex_dir = self.home / ".codex"
        return [
            Target(
                key="claude",
                name="Claude",
                artifact_path=claude_dir / "settings.json",
                format=ArtifactFormat.JSON_EVENT_GROUPS,
                events=list(CLAUDE_EVENTS),
                hooks_dir=claude_dir / "hooks",
                script_names=list(self.script_names),
                templates={self.claude_script_name: self.claude_script_name},
            ),
            Target(
                key="gemini",
                name="Gemini",
                artifact_path=gemini_dir / "settings.json",
                format=ArtifactFormat.JSON_EVENT_GROUPS,
                events=list(GEMINI_EVENTS),
                hooks_dir=gemini_dir / "hooks",
                script_names=[SCRIPT_NAME],
                templates={SCRIPT_NAME: "dashboard-hook-gemini.sh"},
            ),
            Target(
                key="codex",
                name="Codex",
                artifact_path=codex_dir / "config.toml",
                format=ArtifactFormat.TOML_LINES,
                hooks_dir=codex_dir / "hooks",
                script_names=[SCRIPT_NAME],
                templates={SCRIPT_NAME: "dashboard-hook-codex.sh"},
            ),
        ]

    def definition_for(self, target: Target, density: str = "medium") -> HookDefinition | None:
        """
        Desired registration for a JSON target at the given density.

        Returns None for targets whose registration this tool does not write.
        """
        if target.format != ArtifactFormat.JSON_EVENT_GROUPS:
            return None
        by_density = DENSITY_EVENTS[target.key]
        events = by_density.get(density, by_density["medium"])
        # Gemini hooks are synchronous; only Claude registrations run async
        is_async = True if target.key == "claude" else None
        return HookDefinition(command=self.command_for(target.key), events=events, async_=is_async)
