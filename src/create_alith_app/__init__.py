"""
create-alith-app - scaffold an Alith AI chat application.

Writes a React + Vite front end and an Express server wired to an Alith
agent, then tries to install the npm dependencies for you.
"""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .core.errors import (
    AlreadyExistsError,
    InvalidNameError,
    MaterializeError,
    MetadataPatchError,
    ScaffoldError,
    TemplateError,
)


DISTRIBUTION = "create-alith-app"


def _source_checkout_version(pyproject: Path) -> str | None:
    try:
        with open(pyproject, "rb") as f:
            return tomllib.load(f).get("project", {}).get("version")
    except (OSError, tomllib.TOMLDecodeError):
        return None


def _resolve_version() -> str:
    """Installed distribution version, else the one in a source checkout."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        checkout = Path(__file__).resolve().parents[2] / "pyproject.toml"
        return _source_checkout_version(checkout) or "0.0.0"


__version__ = _resolve_version()

__all__ = [
    "__version__",
    "ScaffoldError",
    "InvalidNameError",
    "AlreadyExistsError",
    "TemplateError",
    "MaterializeError",
    "MetadataPatchError",
]
