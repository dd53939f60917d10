"""
PartScript configuration management.

Provides centralized configuration with validation using Pydantic.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file_enabled: bool = False
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: Path.home() / ".partscript" / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class ScriptConfig(BaseModel):
    """Defaults used when reading, writing and applying scripts."""

    default_label: Literal["dos", "gpt"] = "dos"
    sector_size: int = Field(default=512, ge=512, le=65536)
    grain_bytes: int = Field(default=1024 * 1024, ge=512)
    json_output: bool = False
    strict_headers: bool = False  # treat unknown headers as fatal in whole-file reads

    @field_validator("sector_size")
    @classmethod
    def power_of_two(cls, v: int) -> int:
        if v & (v - 1):
            raise ValueError("sector size must be a power of two")
        return v


class PartScriptConfig(BaseModel):
    """Main PartScript configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    script: ScriptConfig = Field(default_factory=ScriptConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> PartScriptConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = Path.home() / ".partscript" / "config.json"

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = Path.home() / ".partscript" / "config.json"

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        if self.logging.file_enabled:
            self.logging.log_directory.mkdir(parents=True, exist_ok=True)


def get_default_config() -> PartScriptConfig:
    """Get the default configuration."""
    return PartScriptConfig()


def load_config(config_path: Path | None = None) -> PartScriptConfig:
    """Load or create configuration."""
    config = PartScriptConfig.load(config_path)
    config.ensure_directories()
    return config
