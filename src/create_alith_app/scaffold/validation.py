"""
Project name validation.

Applies the npm rules for *new* package names. Anything npm would only warn
about for an existing package still makes a name unusable here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote

MAX_NAME_LENGTH = 214

# Names npm refuses outright
BLACKLISTED_NAMES = ("node_modules", "favicon.ico")

# Node.js core modules; a package with one of these names would be shadowed
NODE_CORE_MODULES = (
    "assert",
    "async_hooks",
    "buffer",
    "child_process",
    "cluster",
    "console",
    "constants",
    "crypto",
    "dgram",
    "diagnostics_channel",
    "dns",
    "domain",
    "events",
    "fs",
    "http",
    "http2",
    "https",
    "inspector",
    "module",
    "net",
    "os",
    "path",
    "perf_hooks",
    "process",
    "punycode",
    "querystring",
    "readline",
    "repl",
    "stream",
    "string_decoder",
    "sys",
    "timers",
    "tls",
    "trace_events",
    "tty",
    "url",
    "util",
    "v8",
    "vm",
    "wasi",
    "worker_threads",
    "zlib",
)

_SPECIAL_CHARS_RE = re.compile(r"[~'!()*]")
_SCOPED_NAME_RE = re.compile(r"^(?:@([^/]+?)[/])?([^/]+?)$")


@dataclass(frozen=True)
class NameValidation:
    """Outcome of a name check: ok, or the ordered list of broken rules."""

    ok: bool
    violations: tuple[str, ...] = ()


def _url_safe(value: str) -> bool:
    # Same unreserved set as JavaScript's encodeURIComponent
    try:
        return quote(value, safe="-_.!~*'()") == value
    except UnicodeEncodeError:
        # Lone surrogates (undecodable argv bytes) have no percent-encoding
        return False


def validate_project_name(candidate: str) -> NameValidation:
    """
    Validate a project name against the npm package naming rules.

    Args:
        candidate: Proposed project name (may be empty)

    Returns:
        NameValidation with every violated rule, in a fixed order

    Examples:
        validate_project_name("my-app")   # -> NameValidation(ok=True)
        validate_project_name("My App")   # -> not ok, capitals + URL-unfriendly
    """
    if not candidate:
        return NameValidation(ok=False, violations=("name length must be greater than zero",))

    violations: list[str] = []
    lowered = candidate.lower()

    if candidate.startswith("."):
        violations.append("name cannot start with a period")
    if candidate.startswith("_"):
        violations.append("name cannot start with an underscore")
    if candidate.strip() != candidate:
        violations.append("name cannot contain leading or trailing spaces")

    for blacklisted in BLACKLISTED_NAMES:
        if lowered == blacklisted:
            violations.append(f"{blacklisted} is a blacklisted name")

    for core_module in NODE_CORE_MODULES:
        if lowered == core_module:
            violations.append(f"{core_module} is a core module name")

    if len(candidate) > MAX_NAME_LENGTH:
        violations.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if lowered != candidate:
        violations.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS_RE.search(candidate.split("/")[-1]):
        violations.append("name can no longer contain special characters (\"~'!()*\")")

    if not _url_safe(candidate):
        match = _SCOPED_NAME_RE.match(candidate)
        scoped_ok = (
            match is not None
            and match.group(1) is not None
            and _url_safe(match.group(1))
            and _url_safe(match.group(2))
        )
        if not scoped_ok:
            violations.append("name can only contain URL-friendly characters")

    return NameValidation(ok=not violations, violations=tuple(violations))


def sanitize_name(name: str) -> str:
    """
    Turn arbitrary text into a usable npm package name.

    Args:
        name: Free-form project name (can include spaces, capitals)

    Returns:
        Lowercase, hyphenated name; "my-alith-app" if nothing usable remains

    Examples:
        "My Project" -> "my-project"
        "_Chat Bot!" -> "chat-bot"
    """
    name = name.strip().lower()
    name = re.sub(r"[^a-z0-9._-]+", "-", name)
    name = re.sub(r"-{2,}", "-", name)
    name = name.lstrip("._-").rstrip("-")[:MAX_NAME_LENGTH]

    if not name or not validate_project_name(name).ok:
        return "my-alith-app"
    return name
