"""
Template materialization.

Writes every entry of a template descriptor under the project root, in
declaration order, resolving placeholders against the project spec.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.errors import MaterializeError
from .descriptor import PLACEHOLDERS, PROJECT_NAME, SECRET, EntryKind, TemplateDescriptor, TemplateEntry

logger = logging.getLogger(__name__)

JSON_INDENT = 2


@dataclass(frozen=True)
class ProjectSpec:
    """Name, absolute root and optional secret of the project being created."""

    name: str
    root_path: Path
    secret: str | None = None

    @classmethod
    def create(cls, name: str, base_dir: Path | None = None, secret: str | None = None) -> ProjectSpec:
        base = (base_dir or Path.cwd()).expanduser().resolve()
        return cls(name=name, root_path=base / name, secret=secret or None)


@dataclass(frozen=True)
class MaterializedFile:
    """A template entry and where it landed on disk."""

    entry: TemplateEntry
    path: Path


def placeholder_values(project: ProjectSpec) -> dict[str, str]:
    """
    Values for the placeholders that can be resolved for this project.

    The secret is only included when one was supplied, so its token keeps
    the example value otherwise.
    """
    values = {PROJECT_NAME.key: project.name}
    if project.secret:
        values[SECRET.key] = project.secret
    return values


def substitute_placeholders(content: str, keys: frozenset[str], values: Mapping[str, str]) -> str:
    """
    Replace the tokens of the given placeholder keys with their values.

    Examples:
        substitute_placeholders("# {{project_name}}", frozenset({"project_name"}), {"project_name": "demo"})
        # -> "# demo"
    """
    for key in sorted(keys):
        if key in values:
            content = content.replace(PLACEHOLDERS[key].token, values[key])
    return content


def _resolve_structured(value: Any, keys: frozenset[str], values: Mapping[str, str]) -> Any:
    # Builds a new structure; the descriptor payload is shared and must stay intact
    if isinstance(value, str):
        return substitute_placeholders(value, keys, values)
    if isinstance(value, Mapping):
        return {k: _resolve_structured(v, keys, values) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_resolve_structured(v, keys, values) for v in value]
    return value


def serialize_structured(payload: Mapping[str, Any]) -> str:
    """Serialize a structured payload the same way for every write."""
    return json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False) + "\n"


def render_entry(entry: TemplateEntry, values: Mapping[str, str]) -> str:
    """Produce the final text of one entry."""
    if entry.kind is EntryKind.STRUCTURED:
        return serialize_structured(_resolve_structured(entry.payload, entry.placeholders, values))
    return substitute_placeholders(entry.payload, entry.placeholders, values)


def materialize(descriptor: TemplateDescriptor, project: ProjectSpec) -> list[MaterializedFile]:
    """
    Write every template entry under ``project.root_path``.

    The caller guarantees the root did not exist beforehand. Nothing is
    rolled back on failure: files written before the error stay on disk.

    Args:
        descriptor: Template to materialize
        project: Project spec providing root path and placeholder values

    Returns:
        One MaterializedFile per entry, in descriptor order

    Raises:
        MaterializeError: On the first directory or file that cannot be written
    """
    values = placeholder_values(project)
    written: list[MaterializedFile] = []

    logger.debug("Materializing template '%s' into %s", descriptor.name, project.root_path)

    for entry in descriptor:
        target = project.root_path / entry.relative_path

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MaterializeError(
                f"Failed to create directory: {e.strerror or e}", target.parent
            ) from e

        content = render_entry(entry, values)
        try:
            # newline="" keeps payload line endings identical on every platform
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise MaterializeError(f"Failed to write file: {e.strerror or e}", target) from e

        logger.debug("  wrote %s", entry.relative_path)
        written.append(MaterializedFile(entry=entry, path=target))

    return written
