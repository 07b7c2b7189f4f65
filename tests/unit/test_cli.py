"""Tests for the create-alith-app command line."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from create_alith_app import __version__
from create_alith_app.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    return tmp_path


class TestCreate:
    def test_scaffold_without_install(self, in_tmp: Path) -> None:
        result = runner.invoke(app, ["my-app", "--yes", "--no-install", "--api-key", "sk-test-123"])

        assert result.exit_code == 0, result.output
        assert "Success! Created" in result.output
        assert "npm run dev" in result.output
        root = in_tmp / "my-app"
        assert json.loads((root / "package.json").read_text())["name"] == "my-app"
        assert (root / ".env").read_text() == "GROQ_API_KEY=sk-test-123\n"

    def test_missing_key_warning(self, in_tmp: Path) -> None:
        result = runner.invoke(app, ["my-app", "-y", "--no-install"])

        assert result.exit_code == 0
        assert "GROQ_API_KEY" in result.output
        assert not (in_tmp / "my-app" / ".env").exists()

    def test_directory_option(self, in_tmp: Path) -> None:
        target = in_tmp / "projects"
        target.mkdir()

        result = runner.invoke(app, ["demo", "-y", "--no-install", "-d", str(target)])

        assert result.exit_code == 0
        assert (target / "demo" / "package.json").exists()

    def test_install_failure_shows_manual_guide(self, in_tmp: Path) -> None:
        config = in_tmp / "settings.toml"
        config.write_text("[scaffold]\nretry_backoff = 0\n")

        with patch("create_alith_app.install.runner.shutil.which", return_value=None):
            result = runner.invoke(app, ["my-app", "-y", "--config", str(config)])

        assert result.exit_code == 0
        assert "All automatic installation methods failed." in result.output
        assert "npm install --legacy-peer-deps" in result.output
        assert (in_tmp / "my-app" / "package.json").exists()


class TestFatal:
    def test_existing_directory(self, in_tmp: Path) -> None:
        (in_tmp / "my-app").mkdir()

        result = runner.invoke(app, ["my-app", "-y", "--no-install"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert list((in_tmp / "my-app").iterdir()) == []

    def test_invalid_name(self, in_tmp: Path) -> None:
        result = runner.invoke(app, ["Bad Name", "-y", "--no-install"])

        assert result.exit_code == 1
        assert "capital letters" in result.output
        assert "bad-name" in result.output
        assert list(in_tmp.iterdir()) == []

    def test_unknown_template(self, in_tmp: Path) -> None:
        result = runner.invoke(app, ["my-app", "-y", "--no-install", "-t", "svelte"])

        assert result.exit_code == 1
        assert "Unknown template" in result.output

    def test_bad_config(self, in_tmp: Path) -> None:
        config = in_tmp / "settings.toml"
        config.write_text("[scaffold]\ncommand_timeout = -5\n")

        result = runner.invoke(app, ["my-app", "-y", "--config", str(config)])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        assert not (in_tmp / "my-app").exists()


class TestInteractive:
    def test_prompts(self, in_tmp: Path) -> None:
        result = runner.invoke(app, [], input="chat-bot\nsk-live\nn\n")

        assert result.exit_code == 0, result.output
        assert (in_tmp / "chat-bot" / ".env").read_text() == "GROQ_API_KEY=sk-live\n"

    def test_invalid_answer_reprompts(self, in_tmp: Path) -> None:
        result = runner.invoke(app, [], input="Bad Name\ngood-name\n\nn\n")

        assert result.exit_code == 0, result.output
        assert "capital letters" in result.output
        assert (in_tmp / "good-name" / "package.json").exists()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
