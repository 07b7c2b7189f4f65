"""
Error types for project scaffolding and dependency installation.

Every error carries a short ``kind`` tag. The orchestrator copies that tag
into the run report so the CLI can tell fatal conditions apart without
matching on exception classes.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base exception for all create-alith-app errors."""

    kind = "scaffold_error"

    def __init__(self, message: str, path: Path | None = None):
        self.message = message
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with the offending path if available."""
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message


class InvalidNameError(ScaffoldError):
    """
    Raised when a project name breaks the npm naming rules.

    Recoverable: interactive callers re-prompt instead of aborting.
    """

    kind = "invalid_name"

    def __init__(self, name: str, violations: tuple[str, ...] | list[str]):
        self.name = name
        self.violations = tuple(violations)
        super().__init__(f"Cannot create a project named {name!r} because of npm naming restrictions")


class AlreadyExistsError(ScaffoldError):
    """Raised when the target project directory is already present."""

    kind = "already_exists"


class TemplateError(ScaffoldError):
    """
    Raised for unknown template variants or malformed template descriptors.

    Examples:
    - Duplicate relative paths
    - Absolute paths or ``..`` segments
    - A variant name nobody registered
    """

    kind = "unknown_template"


class MaterializeError(ScaffoldError):
    """Raised when a directory or file of the template cannot be written."""

    kind = "io_error"


class MetadataPatchError(ScaffoldError):
    """Raised when package.json cannot be re-read or rewritten."""

    kind = "io_error"


class CommandFailure(ScaffoldError):
    """
    A single install command failed.

    The strategy runner never raises this; it turns it into an attempt
    result so the fallback chain stays a plain loop.
    """

    kind = "command_failure"

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"{command}: {reason}")


class StrategiesExhausted(ScaffoldError):
    """Every installation strategy failed. Reported, not raised."""

    kind = "all_strategies_exhausted"


class ConfigError(ScaffoldError):
    """Raised when a settings file cannot be read or holds invalid values."""

    kind = "config_error"


class OperationCancelled(ScaffoldError):
    """Raised when the user backs out of a prompt before anything is written."""

    kind = "cancelled"
