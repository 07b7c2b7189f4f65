"""
Template descriptors.

A descriptor is the in-memory declaration of every file a template
produces: relative path, payload and the placeholders inside it. Descriptors
are built once at import time and never change afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any

from ..core.errors import TemplateError


@dataclass(frozen=True)
class Placeholder:
    """A named substitution point and the literal token marking it."""

    key: str
    token: str


PROJECT_NAME = Placeholder(key="project_name", token="{{project_name}}")
# The example value shipped in .env.example doubles as the token
SECRET = Placeholder(key="secret", token="your_groq_api_key_here")

PLACEHOLDERS: dict[str, Placeholder] = {p.key: p for p in (PROJECT_NAME, SECRET)}

# Secret environment variable read by the generated server
SECRET_ENV_VAR = "GROQ_API_KEY"
METADATA_FILE = "package.json"
SECRET_EXAMPLE_FILE = ".env.example"
SECRET_FILE = ".env"


class EntryKind(str, Enum):
    """How a payload is turned into bytes."""

    STRUCTURED = "structured"
    TEXT = "text"


@dataclass(frozen=True)
class TemplateEntry:
    """One file of a template."""

    relative_path: str
    kind: EntryKind
    payload: Any
    placeholders: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def structured(
        cls, relative_path: str, payload: Mapping[str, Any], *placeholders: str
    ) -> TemplateEntry:
        return cls(relative_path, EntryKind.STRUCTURED, payload, frozenset(placeholders))

    @classmethod
    def text(cls, relative_path: str, payload: str, *placeholders: str) -> TemplateEntry:
        return cls(relative_path, EntryKind.TEXT, payload, frozenset(placeholders))


def _check_relative_path(path: str) -> None:
    """Reject absolute paths, drive letters and parent traversal."""
    if not path or path.strip() != path:
        raise TemplateError(f"Invalid template path: {path!r}")

    posix = PurePosixPath(path)
    windows = PureWindowsPath(path)
    if posix.is_absolute() or windows.is_absolute() or windows.drive:
        raise TemplateError(f"Template path must be relative: {path!r}")
    if ".." in posix.parts or ".." in windows.parts:
        raise TemplateError(f"Template path escapes the project root: {path!r}")


@dataclass(frozen=True)
class TemplateDescriptor:
    """
    Ordered, validated collection of template entries.

    Invariants checked on construction:
    - relative paths are unique
    - no path is absolute or climbs out of the project root
    - every declared placeholder is known
    """

    name: str
    entries: tuple[TemplateEntry, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for entry in self.entries:
            _check_relative_path(entry.relative_path)
            normalized = PurePosixPath(entry.relative_path).as_posix()
            if normalized in seen:
                raise TemplateError(f"Duplicate template path: {entry.relative_path!r}")
            seen.add(normalized)

            unknown = entry.placeholders - PLACEHOLDERS.keys()
            if unknown:
                raise TemplateError(
                    f"Unknown placeholder(s) {sorted(unknown)} in {entry.relative_path!r}"
                )

    @classmethod
    def build(cls, name: str, entries: Iterable[TemplateEntry]) -> TemplateDescriptor:
        return cls(name=name, entries=tuple(entries))

    def __iter__(self) -> Iterator[TemplateEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def paths(self) -> list[str]:
        """Relative paths in declaration order."""
        return [entry.relative_path for entry in self.entries]

    def get(self, relative_path: str) -> TemplateEntry | None:
        for entry in self.entries:
            if entry.relative_path == relative_path:
                return entry
        return None
