"""
MountAssign configuration management.

Provides centralized configuration with validation using Pydantic.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _default_mount_points() -> dict[str, str]:
    return {"/": "root", "/boot": "boot", "/home": "home"}


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_enabled: bool = True
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: Path.home() / ".mountassign" / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class EditorConfig(BaseModel):
    """Configuration for the mount point editor."""

    root_mount_point: str = "/"
    # Offered in the mount point selector, in display order (value -> name)
    default_mount_points: dict[str, str] = Field(default_factory=_default_mount_points)
    non_mountable_format_types: list[str] = Field(default_factory=lambda: ["biosboot"])
    reformat_locked_format_types: list[str] = Field(default_factory=lambda: ["btrfs"])

    @field_validator("root_mount_point")
    @classmethod
    def check_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("root mount point must be an absolute path")
        return v


class BackendConfig(BaseModel):
    """Configuration for the storage backend used by the CLI and GUI."""

    state_file: Path = Field(
        default_factory=lambda: Path.home() / ".mountassign" / "storage.json"
    )

    @field_validator("state_file", mode="before")
    @classmethod
    def expand_state_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class MountAssignConfig(BaseModel):
    """Main MountAssign configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> MountAssignConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = Path.home() / ".mountassign" / "config.json"

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = Path.home() / ".mountassign" / "config.json"

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.logging.log_directory.mkdir(parents=True, exist_ok=True)
        self.backend.state_file.parent.mkdir(parents=True, exist_ok=True)


def get_default_config() -> MountAssignConfig:
    """Get the default configuration."""
    return MountAssignConfig()


def load_config(config_path: Path | None = None) -> MountAssignConfig:
    """Load or create configuration."""
    config = MountAssignConfig.load(config_path)
    config.ensure_directories()
    return config
