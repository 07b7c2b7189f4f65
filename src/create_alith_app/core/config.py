"""
Scaffolder settings.

Settings come from an optional TOML file (``[scaffold]`` table) and are
validated with pydantic. Nothing here reads the process environment.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

# Design constants: per-command bound and pause between failed strategies
DEFAULT_COMMAND_TIMEOUT = 120.0
DEFAULT_RETRY_BACKOFF = 1.0
DEFAULT_TEMPLATE = "default"


class ScaffoldSettings(BaseModel):
    """Tunable knobs for a scaffolding run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    command_timeout: float = Field(default=DEFAULT_COMMAND_TIMEOUT, gt=0)
    retry_backoff: float = Field(default=DEFAULT_RETRY_BACKOFF, ge=0)
    default_template: str = DEFAULT_TEMPLATE
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


def load_settings(toml_path: Path | None = None) -> ScaffoldSettings:
    """
    Load settings from a TOML file.

    Args:
        toml_path: Path to the settings file, or None for defaults

    Returns:
        ScaffoldSettings with parsed values or defaults

    Raises:
        ConfigError: If the file is unreadable, malformed or has bad values
    """
    if toml_path is None:
        return ScaffoldSettings()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read settings file: {e.strerror or e}", toml_path) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", toml_path) from e

    section: Any = data.get("scaffold", {})
    if not isinstance(section, dict):
        raise ConfigError("[scaffold] must be a table", toml_path)

    try:
        return ScaffoldSettings(**section)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid settings: {problems}", toml_path) from e
