"""Tests for package.json and .env patches."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from create_alith_app.core.errors import MetadataPatchError
from create_alith_app.scaffold.materializer import ProjectSpec, materialize
from create_alith_app.scaffold.metadata import patch_project_name, patch_secret
from create_alith_app.scaffold.payloads import DEFAULT_TEMPLATE


class TestPatchProjectName:
    def test_sets_name_and_keeps_other_fields(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"name": "old", "version": "1.0.0"}')

        path = patch_project_name(tmp_path, "new-name")

        data = json.loads(path.read_text())
        assert data == {"name": "new-name", "version": "1.0.0"}
        assert path.read_text().endswith("}\n")

    def test_idempotent(self, project: ProjectSpec) -> None:
        materialize(DEFAULT_TEMPLATE, project)
        first = patch_project_name(project.root_path, project.name).read_bytes()
        second = patch_project_name(project.root_path, project.name).read_bytes()
        assert first == second

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MetadataPatchError) as exc_info:
            patch_project_name(tmp_path, "x")
        assert exc_info.value.path == tmp_path / "package.json"

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")
        with pytest.raises(MetadataPatchError, match="not valid JSON"):
            patch_project_name(tmp_path, "x")

    def test_not_an_object(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("[]")
        with pytest.raises(MetadataPatchError, match="JSON object"):
            patch_project_name(tmp_path, "x")


class TestPatchSecret:
    def test_writes_env_from_example(self, project: ProjectSpec) -> None:
        materialize(DEFAULT_TEMPLATE, project)

        path = patch_secret(project.root_path, "sk-test-123")

        assert path == project.root_path / ".env"
        assert path.read_text() == "GROQ_API_KEY=sk-test-123\n"
        assert "your_groq_api_key_here" in (project.root_path / ".env.example").read_text()

    def test_no_secret_is_noop(self, project: ProjectSpec) -> None:
        materialize(DEFAULT_TEMPLATE, project)
        assert patch_secret(project.root_path, None) is None
        assert not (project.root_path / ".env").exists()

    def test_missing_example_is_noop(self, tmp_path: Path) -> None:
        assert patch_secret(tmp_path, "sk-1") is None
        assert not (tmp_path / ".env").exists()
