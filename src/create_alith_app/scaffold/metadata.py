"""
Post-materialization patches: package name and secret file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..core.errors import MetadataPatchError
from .descriptor import METADATA_FILE, SECRET, SECRET_EXAMPLE_FILE, SECRET_FILE
from .materializer import serialize_structured

logger = logging.getLogger(__name__)


def patch_project_name(root_path: Path, name: str) -> Path:
    """
    Set the ``name`` field of the project's package.json.

    Args:
        root_path: Project root directory
        name: Validated project name

    Returns:
        Path to the rewritten package.json

    Raises:
        MetadataPatchError: If package.json is missing, unreadable or not a JSON object
    """
    metadata_path = root_path / METADATA_FILE

    try:
        data = json.loads(metadata_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise MetadataPatchError(f"Cannot read {METADATA_FILE}: {e.strerror or e}", metadata_path) from e
    except json.JSONDecodeError as e:
        raise MetadataPatchError(f"{METADATA_FILE} is not valid JSON: {e}", metadata_path) from e

    if not isinstance(data, dict):
        raise MetadataPatchError(f"{METADATA_FILE} must contain a JSON object", metadata_path)

    data["name"] = name

    try:
        with open(metadata_path, "w", encoding="utf-8", newline="") as f:
            f.write(serialize_structured(data))
    except OSError as e:
        raise MetadataPatchError(f"Cannot write {METADATA_FILE}: {e.strerror or e}", metadata_path) from e

    return metadata_path


def patch_secret(root_path: Path, secret: str | None) -> Path | None:
    """
    Write the secret file from the example file, with the secret filled in.

    A missing secret or a missing example file is expected and simply means
    there is nothing to do.

    Returns:
        Path to the written secret file, or None if nothing was written
    """
    if not secret:
        return None

    example_path = root_path / SECRET_EXAMPLE_FILE
    if not example_path.exists():
        logger.debug("No %s in %s; skipping secret file", SECRET_EXAMPLE_FILE, root_path)
        return None

    content = example_path.read_text(encoding="utf-8").replace(SECRET.token, secret)
    secret_path = root_path / SECRET_FILE
    with open(secret_path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return secret_path
