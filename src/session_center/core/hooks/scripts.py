"""
Deployment and safe removal of hook scripts.

Hook scripts are copied byte-for-byte from the templates bundled with this
package into each host application's hooks directory. Removal never goes by
path alone: a deployed file is deleted only when its content identifies it as
ours, since another tool may use the same filename.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from session_center.core.hooks.errors import TemplateMissingError
from session_center.core.hooks.models import Target
from session_center.core.hooks.ownership import OwnershipClassifier

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent.parent / "templates" / "hooks"


class ScriptStatus(str, Enum):
    """Outcome of handling one deployed script."""

    COPIED = "copied"
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    MISSING = "missing"
    SKIPPED = "skipped"
    FAILED = "failed"


class ScriptResult(BaseModel):
    """Result of deploying or removing one hook script."""

    target: str = Field(description="Target display name")
    path: str = Field(description="Deployed script path")
    status: ScriptStatus
    error: str | None = None


def verify_templates(targets: Iterable[Target], templates_dir: Path = TEMPLATES_DIR) -> None:
    """
    Check that every bundled template the targets need is present.

    Raises:
        TemplateMissingError: For the first missing template
    """
    for target in targets:
        for template_name in target.templates.values():
            template = templates_dir / template_name
            if not template.is_file():
                raise TemplateMissingError(template)


def sync_script(template: Path, dest: Path, make_executable: bool = True) -> bool:
    """
    Copy `template` to `dest` unless the content is already identical.

    Returns:
        True if the file was copied
    """
    content = template.read_bytes()
    if dest.exists() and dest.read_bytes() == content:
        return False

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(content)
    if make_executable:
        dest.chmod(0o755)
    logger.info(f"Synced hook script {template.name} -> {dest}")
    return True


def deploy_scripts(
    target: Target,
    templates_dir: Path = TEMPLATES_DIR,
    make_executable: bool = True,
) -> list[ScriptResult]:
    """Deploy a target's hook scripts, one result per script."""
    results: list[ScriptResult] = []
    for script_name, template_name in target.templates.items():
        dest = target.hooks_dir / script_name
        try:
            copied = sync_script(templates_dir / template_name, dest, make_executable)
        except OSError as e:
            logger.warning(f"Could not deploy {dest}: {e}")
            results.append(
                ScriptResult(
                    target=target.name, path=str(dest), status=ScriptStatus.FAILED, error=str(e)
                )
            )
            continue
        status = ScriptStatus.COPIED if copied else ScriptStatus.UNCHANGED
        results.append(ScriptResult(target=target.name, path=str(dest), status=status))
    return results


def remove_owned_script(
    path: Path, classifier: OwnershipClassifier, target: str, dry_run: bool = False
) -> ScriptResult:
    """
    Delete a deployed script if its content marks it as ours.

    Args:
        path: Deployed script path
        classifier: Decides ownership from the file content
        target: Target display name, for the result
        dry_run: Report what would happen without deleting

    Returns:
        ScriptResult with status removed, missing, skipped or failed
    """
    if not path.exists():
        return ScriptResult(target=target, path=str(path), status=ScriptStatus.MISSING)

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
        if not classifier.is_owned_script(content):
            logger.warning(f"Not removing {path}: no project marker in file content")
            return ScriptResult(target=target, path=str(path), status=ScriptStatus.SKIPPED)
        if not dry_run:
            path.unlink()
            logger.info(f"Removed hook script {path}")
    except OSError as e:
        logger.warning(f"Could not verify {path}: {e}")
        return ScriptResult(
            target=target, path=str(path), status=ScriptStatus.FAILED, error=str(e)
        )

    return ScriptResult(target=target, path=str(path), status=ScriptStatus.REMOVED)


def remove_target_scripts(
    target: Target, classifier: OwnershipClassifier, dry_run: bool = False
) -> list[ScriptResult]:
    """Remove every script name the target may own."""
    return [
        remove_owned_script(target.hooks_dir / name, classifier, target.name, dry_run=dry_run)
        for name in target.script_names
    ]
