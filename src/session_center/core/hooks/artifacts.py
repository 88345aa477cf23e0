"""
Configuration artifact readers and writers.

Two backends, one per artifact format:
    - JsonEventGroupsArtifact: JSON settings documents (Claude, Gemini)
    - TomlLinesArtifact: line-oriented TOML (Codex), handled as plain lines so
      every line we do not own is written back exactly as read

Writes are atomic (temp file + rename) so an interrupted run never leaves a
half-written settings file behind. A missing artifact loads as empty; a file
that exists but cannot be parsed raises ArtifactError.
"""

from __future__ import annotations

import json
import logging
import os
import secrets
from pathlib import Path
from typing import Any

from session_center.core.hooks.errors import ArtifactError
from session_center.core.hooks.models import ArtifactFormat, Target

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, text: str) -> None:
    """
    Write text to `path` via a sibling temp file and rename.

    Raises:
        ArtifactError: If the file could not be written
    """
    tmp_path = path.with_name(f"{path.name}.tmp.{secrets.token_hex(4)}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise ArtifactError(path, f"write failed: {e}") from e


class JsonEventGroupsArtifact:
    """A JSON settings document with a `hooks` mapping of event -> groups."""

    format = ArtifactFormat.JSON_EVENT_GROUPS

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> dict[str, Any]:
        """
        Load the document.

        Returns:
            The parsed document, or an empty dict if the file does not exist

        Raises:
            ArtifactError: If the file is not valid JSON, is not an object, or
                its `hooks` value is neither an object nor null
        """
        if not self.path.exists():
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            raise ArtifactError(self.path, str(e)) from e

        if not isinstance(document, dict):
            raise ArtifactError(self.path, "top-level value is not a JSON object")
        hooks = document.get("hooks")
        if hooks is not None and not isinstance(hooks, dict):
            raise ArtifactError(self.path, "'hooks' is not a JSON object")

        logger.debug(f"Loaded {self.path}")
        return document

    def dump(self, document: dict[str, Any]) -> str:
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"

    def save(self, document: dict[str, Any]) -> None:
        atomic_write_text(self.path, self.dump(document))
        logger.info(f"Wrote {self.path}")


class TomlLinesArtifact:
    """
    A TOML document handled line by line.

    Lines are split on newline only, so carriage returns and the presence or
    absence of a trailing newline survive a load/save round trip.
    """

    format = ArtifactFormat.TOML_LINES

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> list[str]:
        """
        Load the document as lines.

        Raises:
            ArtifactError: If the file cannot be read or decoded
        """
        if not self.path.exists():
            return []

        try:
            text = self.path.read_bytes().decode("utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise ArtifactError(self.path, str(e)) from e

        logger.debug(f"Loaded {self.path}")
        return text.split("\n")

    def save(self, lines: list[str]) -> None:
        atomic_write_text(self.path, "\n".join(lines))
        logger.info(f"Wrote {self.path}")


def open_artifact(target: Target) -> JsonEventGroupsArtifact | TomlLinesArtifact:
    """Return the backend for a target's artifact format."""
    if target.format == ArtifactFormat.TOML_LINES:
        return TomlLinesArtifact(target.artifact_path)
    return JsonEventGroupsArtifact(target.artifact_path)
