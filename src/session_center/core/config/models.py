"""
Configuration data models for session-center.

The dashboard persists its settings to <data_dir>/server-config.json with
camelCase keys (hookDensity, enabledClis). These models accept those keys by
alias as well as their snake_case field names.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from session_center.core.hooks.ownership import (
    DEFAULT_COMMAND_PATTERN,
    DEFAULT_SCRIPT_MARKERS,
    DEFAULT_SOURCE_ID,
)

KNOWN_CLIS = ("claude", "gemini", "codex")


class SessionCenterConfig(BaseModel):
    """
    Settings for one install or reset run.

    Built once by load_config() and passed explicitly to every component.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled_clis: list[str] = Field(
        default_factory=lambda: ["claude"],
        alias="enabledClis",
        description="Host applications to register hooks in: claude, gemini, codex"
    )
    hook_density: str = Field(
        default="medium",
        alias="hookDensity",
        pattern="^(high|medium|low)$",
        description="How many events to register: 'high', 'medium' or 'low'"
    )
    port: int = Field(
        default=3333,
        ge=1,
        le=65535,
        description="Port of the locally running dashboard server"
    )
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local" / "share" / "session-center",
        description="Directory holding persisted state and backups"
    )
    home_dir: Path = Field(
        default_factory=Path.home,
        description="Home directory the host applications keep their config in"
    )
    source_id: str = Field(
        default=DEFAULT_SOURCE_ID,
        description="Ownership marker written into every hook group we create"
    )
    command_pattern: str = Field(
        default=DEFAULT_COMMAND_PATTERN,
        description="Command substring identifying legacy (unmarked) registrations"
    )
    script_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SCRIPT_MARKERS),
        description="Literal strings identifying our deployed hook scripts"
    )
    reset_timeout: float = Field(
        default=2.0,
        gt=0,
        description="Seconds to wait for the dashboard's reset endpoint"
    )

    @field_validator("enabled_clis")
    @classmethod
    def validate_enabled_clis(cls, v: list[str]) -> list[str]:
        """Normalize case, drop duplicates, reject unknown host applications."""
        normalized = list(dict.fromkeys(name.strip().lower() for name in v if name.strip()))
        unknown = [name for name in normalized if name not in KNOWN_CLIS]
        if unknown:
            raise ValueError(
                f"Unknown CLI(s): {', '.join(unknown)}. Expected: {', '.join(KNOWN_CLIS)}"
            )
        return normalized

    @property
    def backups_dir(self) -> Path:
        return self.data_dir / "backups"

    @property
    def server_config_path(self) -> Path:
        return self.data_dir / "server-config.json"

    @property
    def database_path(self) -> Path:
        return self.data_dir / "sessions.db"

    @property
    def state_files(self) -> list[Path]:
        """Auxiliary persisted state captured in every backup."""
        return [self.server_config_path, self.database_path]

    @property
    def reset_url(self) -> str:
        return f"http://localhost:{self.port}/api/reset"
