"""
Project scaffolding.

This package contains the pieces of a scaffolding run:
- validation.py - npm package name rules
- descriptor.py - template entries, placeholders and descriptors
- payloads.py - the built-in template(s)
- materializer.py - writing a descriptor to disk
- metadata.py - package.json name and .env patches
- orchestrator.py - the end-to-end run and its report
"""

from __future__ import annotations

from .descriptor import (
    PROJECT_NAME,
    SECRET,
    EntryKind,
    Placeholder,
    TemplateDescriptor,
    TemplateEntry,
)
from .materializer import MaterializedFile, ProjectSpec, materialize, substitute_placeholders
from .metadata import patch_project_name, patch_secret
from .orchestrator import (
    NullReporter,
    RunOutcome,
    RunReport,
    ScaffoldRequest,
    Scaffolder,
    ScaffoldState,
)
from .payloads import DEFAULT_TEMPLATE, TEMPLATES, get_template
from .validation import NameValidation, sanitize_name, validate_project_name

__all__ = [
    # Validation
    "NameValidation",
    "validate_project_name",
    "sanitize_name",
    # Descriptors
    "EntryKind",
    "Placeholder",
    "PROJECT_NAME",
    "SECRET",
    "TemplateEntry",
    "TemplateDescriptor",
    "DEFAULT_TEMPLATE",
    "TEMPLATES",
    "get_template",
    # Materialization
    "ProjectSpec",
    "MaterializedFile",
    "materialize",
    "substitute_placeholders",
    "patch_project_name",
    "patch_secret",
    # Orchestration
    "NullReporter",
    "RunOutcome",
    "RunReport",
    "ScaffoldRequest",
    "ScaffoldState",
    "Scaffolder",
]
