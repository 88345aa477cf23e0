"""
Tests for ownership classification.

Tests cover:
- Hook groups: marker match, legacy command match, foreign and opaque groups
- Config lines: section comment and notify statements
- Scripts: content markers only
"""

import pytest

from session_center.core.hooks import HookGroup, OwnershipClassifier


@pytest.fixture
def classifier() -> OwnershipClassifier:
    return OwnershipClassifier()


class TestIsOwnedGroup:
    """Tests for OwnershipClassifier.is_owned_group."""

    def test_marker_match(self, classifier: OwnershipClassifier) -> None:
        group = HookGroup.parse(
            {"_source": "ai-agent-session-center", "hooks": [{"type": "command", "command": "x"}]}
        )
        assert classifier.is_owned_group(group)

    def test_legacy_source_key_accepted(self, classifier: OwnershipClassifier) -> None:
        group = HookGroup.parse({"source": "ai-agent-session-center", "hooks": []})
        assert classifier.is_owned_group(group)

    def test_marker_wins_after_command_rename(self, classifier: OwnershipClassifier) -> None:
        """A marked group stays ours even if its command no longer matches."""
        group = HookGroup.parse(
            {
                "_source": "ai-agent-session-center",
                "hooks": [{"type": "command", "command": "~/.claude/hooks/renamed-relay.sh"}],
            }
        )
        assert classifier.is_owned_group(group)

    def test_legacy_command_match(self, classifier: OwnershipClassifier) -> None:
        group = HookGroup.parse(
            {"hooks": [{"type": "command", "command": "~/.claude/hooks/dashboard-hook.sh"}]}
        )
        assert classifier.is_owned_group(group)

    def test_foreign_group(self, classifier: OwnershipClassifier) -> None:
        group = HookGroup.parse(
            {"matcher": "Bash", "hooks": [{"type": "command", "command": "my-linter.sh"}]}
        )
        assert not classifier.is_owned_group(group)

    def test_other_source_is_foreign(self, classifier: OwnershipClassifier) -> None:
        group = HookGroup.parse(
            {"_source": "some-other-tool", "hooks": [{"type": "command", "command": "notify"}]}
        )
        assert not classifier.is_owned_group(group)

    def test_opaque_values_are_foreign(self, classifier: OwnershipClassifier) -> None:
        """Non-mapping values are never ours, even if they mention our script."""
        assert not classifier.is_owned_group(HookGroup.parse("dashboard-hook.sh"))
        assert not classifier.is_owned_group(HookGroup.parse(None))
        assert not classifier.is_owned_group(HookGroup.parse(["dashboard-hook"]))

    def test_malformed_hooks_list_tolerated(self, classifier: OwnershipClassifier) -> None:
        group = HookGroup.parse({"hooks": ["not a mapping", {"command": 42}]})
        assert group.hooks == []
        assert not classifier.is_owned_group(group)

    def test_custom_source_and_pattern(self) -> None:
        classifier = OwnershipClassifier(source_id="my-dash", command_pattern="relay.sh")
        assert classifier.is_owned_group(HookGroup.parse({"_source": "my-dash"}))
        assert classifier.is_owned_group(
            HookGroup.parse({"hooks": [{"command": "/opt/relay.sh"}]})
        )
        assert not classifier.is_owned_group(
            HookGroup.parse({"_source": "ai-agent-session-center"})
        )


class TestIsOwnedLine:
    """Tests for OwnershipClassifier.is_owned_line."""

    def test_section_comment(self, classifier: OwnershipClassifier) -> None:
        assert classifier.is_owned_line("# [ai-agent-session-center] dashboard notify hook")

    def test_notify_line(self, classifier: OwnershipClassifier) -> None:
        assert classifier.is_owned_line('notify = ["~/.codex/hooks/dashboard-hook.sh"]')
        assert classifier.is_owned_line('  notify = ["/home/me/.codex/hooks/dashboard-hook.sh"]')

    def test_foreign_notify_line(self, classifier: OwnershipClassifier) -> None:
        assert not classifier.is_owned_line('notify = ["terminal-notifier"]')

    def test_other_lines_mentioning_pattern(self, classifier: OwnershipClassifier) -> None:
        """Only notify statements are matched by pattern."""
        assert not classifier.is_owned_line('command = "dashboard-hook.sh"')

    def test_unrelated_lines(self, classifier: OwnershipClassifier) -> None:
        assert not classifier.is_owned_line('model = "o3"')
        assert not classifier.is_owned_line("")


class TestIsOwnedScript:
    """Tests for OwnershipClassifier.is_owned_script."""

    def test_project_name_marker(self, classifier: OwnershipClassifier) -> None:
        assert classifier.is_owned_script("#!/bin/bash\n# AI Agent Session Center hook\n")

    def test_source_id_marker(self, classifier: OwnershipClassifier) -> None:
        assert classifier.is_owned_script("#!/bin/bash\n# Marker: ai-agent-session-center\n")

    def test_legacy_marker(self, classifier: OwnershipClassifier) -> None:
        assert classifier.is_owned_script("MQ=/tmp/claude-session-center/queue.jsonl\n")

    def test_foreign_script(self, classifier: OwnershipClassifier) -> None:
        assert not classifier.is_owned_script("#!/bin/bash\necho 'someone else'\n")
