"""
Tests for hook script deployment and removal.

Tests cover:
- Bundled templates: present and carrying the project marker
- Deployment: copy, skip when unchanged, executable bit
- Removal: content-verified, foreign scripts left alone
"""

import os
import stat
from pathlib import Path

import pytest

from session_center.core.hooks import (
    OwnershipClassifier,
    PlatformResolver,
    ScriptStatus,
    TemplateMissingError,
    deploy_scripts,
    remove_owned_script,
    remove_target_scripts,
    verify_templates,
)
from session_center.core.hooks.scripts import TEMPLATES_DIR, sync_script


@pytest.fixture
def classifier() -> OwnershipClassifier:
    return OwnershipClassifier()


class TestBundledTemplates:
    """Tests for the templates shipped with the package."""

    def test_all_templates_present(self) -> None:
        targets = PlatformResolver(platform="linux").build_targets()
        targets += PlatformResolver(platform="win32").build_targets()
        verify_templates(targets)

    def test_templates_carry_marker(self, classifier: OwnershipClassifier) -> None:
        for template in TEMPLATES_DIR.iterdir():
            assert classifier.is_owned_script(template.read_text(encoding="utf-8")), template.name

    def test_missing_template_raises(self, tmp_path: Path) -> None:
        targets = PlatformResolver(platform="linux").build_targets()

        with pytest.raises(TemplateMissingError) as exc_info:
            verify_templates(targets, tmp_path)

        assert exc_info.value.template == tmp_path / "dashboard-hook.sh"


class TestDeployScripts:
    """Tests for deploy_scripts and sync_script."""

    def test_deploy_copies_template(self, resolver: PlatformResolver) -> None:
        gemini = resolver.build_targets()[1]

        results = deploy_scripts(gemini)

        dest = gemini.hooks_dir / "dashboard-hook.sh"
        assert [r.status for r in results] == [ScriptStatus.COPIED]
        assert dest.read_bytes() == (TEMPLATES_DIR / "dashboard-hook-gemini.sh").read_bytes()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_deploy_sets_executable(self, resolver: PlatformResolver) -> None:
        claude = resolver.build_targets()[0]

        deploy_scripts(claude)

        mode = (claude.hooks_dir / "dashboard-hook.sh").stat().st_mode
        assert mode & stat.S_IXUSR

    def test_redeploy_unchanged(self, resolver: PlatformResolver) -> None:
        codex = resolver.build_targets()[2]
        deploy_scripts(codex)

        results = deploy_scripts(codex)

        assert [r.status for r in results] == [ScriptStatus.UNCHANGED]

    def test_sync_overwrites_stale_copy(self, tmp_path: Path) -> None:
        template = tmp_path / "template.sh"
        template.write_text("#!/bin/bash\n# AI Agent Session Center v2\n")
        dest = tmp_path / "hooks" / "dashboard-hook.sh"
        dest.parent.mkdir()
        dest.write_text("#!/bin/bash\n# AI Agent Session Center v1\n")

        assert sync_script(template, dest, make_executable=False)
        assert dest.read_text() == template.read_text()

    def test_deploy_failure_reported(self, resolver: PlatformResolver) -> None:
        claude = resolver.build_targets()[0]
        claude.hooks_dir.parent.mkdir(parents=True)
        claude.hooks_dir.write_text("a file where the hooks directory should be")

        results = deploy_scripts(claude)

        assert results[0].status == ScriptStatus.FAILED
        assert results[0].error


class TestRemoveScripts:
    """Tests for remove_owned_script and remove_target_scripts."""

    def test_removes_owned_script(self, tmp_path: Path, classifier: OwnershipClassifier) -> None:
        script = tmp_path / "dashboard-hook.sh"
        script.write_text("#!/bin/bash\n# AI Agent Session Center\n")

        result = remove_owned_script(script, classifier, "Claude")

        assert result.status == ScriptStatus.REMOVED
        assert not script.exists()

    def test_skips_foreign_script(self, tmp_path: Path, classifier: OwnershipClassifier) -> None:
        """A same-named script from another tool is never deleted."""
        script = tmp_path / "dashboard-hook.sh"
        script.write_text("#!/bin/bash\necho 'another dashboard'\n")

        result = remove_owned_script(script, classifier, "Claude")

        assert result.status == ScriptStatus.SKIPPED
        assert script.exists()

    def test_missing_script(self, tmp_path: Path, classifier: OwnershipClassifier) -> None:
        result = remove_owned_script(tmp_path / "dashboard-hook.sh", classifier, "Claude")
        assert result.status == ScriptStatus.MISSING

    def test_dry_run_keeps_file(self, tmp_path: Path, classifier: OwnershipClassifier) -> None:
        script = tmp_path / "dashboard-hook.sh"
        script.write_text("# Marker: ai-agent-session-center\n")

        result = remove_owned_script(script, classifier, "Claude", dry_run=True)

        assert result.status == ScriptStatus.REMOVED
        assert script.exists()

    def test_remove_target_scripts_checks_every_name(
        self, resolver: PlatformResolver, classifier: OwnershipClassifier
    ) -> None:
        claude = resolver.build_targets()[0]
        deploy_scripts(claude)

        results = remove_target_scripts(claude, classifier)

        assert [r.status for r in results] == [ScriptStatus.REMOVED, ScriptStatus.MISSING]
        assert not (claude.hooks_dir / "dashboard-hook.sh").exists()
