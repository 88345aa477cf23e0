"""
Ownership classification for configuration fragments.

Decides whether a fragment of a foreign-owned configuration artifact was
created by us (owned, eligible for update or removal) or belongs to someone
else (foreign, always preserved).

Matching is two-tier:
    - Strong: the ownership marker (`_source` on JSON groups, the bracketed
      source id on TOML comment lines). Checked first and authoritative, so a
      future rename of the hook command never orphans marked groups.
    - Weak: the legacy command substring, for installs that predate the marker.

Anything ambiguous defaults to foreign.
"""

from __future__ import annotations

from collections.abc import Iterable

from session_center.core.hooks.models import HookGroup

DEFAULT_SOURCE_ID = "ai-agent-session-center"
DEFAULT_COMMAND_PATTERN = "dashboard-hook"
DEFAULT_SCRIPT_MARKERS = ("AI Agent Session Center", "claude-session-center")


class OwnershipClassifier:
    """
    Classifies hook groups, config lines and deployed scripts.

    Example:
        >>> classifier = OwnershipClassifier()
        >>> classifier.is_owned_line('notify = ["~/.codex/hooks/dashboard-hook.sh"]')
        True
        >>> classifier.is_owned_line('model = "o3"')
        False
    """

    def __init__(
        self,
        source_id: str = DEFAULT_SOURCE_ID,
        command_pattern: str = DEFAULT_COMMAND_PATTERN,
        script_markers: Iterable[str] = DEFAULT_SCRIPT_MARKERS,
    ) -> None:
        self.source_id = source_id
        self.command_pattern = command_pattern
        # The source id always identifies our scripts too
        self.script_markers = tuple(dict.fromkeys([*script_markers, source_id]))

    def is_owned_group(self, group: HookGroup) -> bool:
        """Marker match first, then any hook command containing the pattern."""
        if group.opaque:
            return False
        if group.source == self.source_id:
            return True
        return any(self.command_pattern in command for command in group.commands)

    def is_owned_line(self, line: str) -> bool:
        """Our section comment, or a `notify` statement invoking our script."""
        if f"[{self.source_id}]" in line:
            return True
        return line.lstrip().startswith("notify") and self.command_pattern in line

    def is_owned_script(self, content: str) -> bool:
        """
        Content check for a deployed hook script.

        Never decide by path: another tool may deploy a script under the
        same filename convention.
        """
        return any(marker in content for marker in self.script_markers)
