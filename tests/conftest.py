"""Shared pytest fixtures for create-alith-app tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from create_alith_app.install.runner import CommandResult
from create_alith_app.scaffold.materializer import ProjectSpec


class ScriptedExecutor:
    """Executor that fails the commands it is told to and records every call."""

    def __init__(self, failing: dict[str, str] | None = None):
        self.failing = dict(failing or {})
        self.calls: list[tuple[str, Path, float]] = []

    def run(self, command: str, cwd: Path, timeout: float) -> CommandResult:
        self.calls.append((command, cwd, timeout))
        if command in self.failing:
            return CommandResult(command, ok=False, reason=self.failing[command])
        return CommandResult(command, ok=True)

    @property
    def commands(self) -> list[str]:
        return [call[0] for call in self.calls]


class RecordingReporter:
    """Reporter that keeps (event, message) pairs."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def start(self, message: str) -> None:
        self.events.append(("start", message))

    def succeed(self, message: str) -> None:
        self.events.append(("succeed", message))

    def fail(self, message: str) -> None:
        self.events.append(("fail", message))

    def info(self, message: str) -> None:
        self.events.append(("info", message))

    def messages(self, event: str) -> list[str]:
        return [m for e, m in self.events if e == event]


class ScriptedPrompter:
    """Prompter answering from fixed queues."""

    def __init__(self, answers: list[str | None] | None = None, confirms: list[bool] | None = None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.questions: list[str] = []

    def ask(self, question, *, default=None, secret=False, validate=None):
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else default

    def confirm(self, question, *, default=True):
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else default


@pytest.fixture
def executor() -> ScriptedExecutor:
    """Executor where every command succeeds until told otherwise via ``failing``."""
    return ScriptedExecutor()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def sleeps() -> list[float]:
    """Collects backoff sleeps instead of sleeping."""
    return []


@pytest.fixture
def project(tmp_path: Path) -> ProjectSpec:
    """A project spec rooted in a fresh temporary directory."""
    return ProjectSpec.create("my-app", tmp_path)


@pytest.fixture
def prompter_factory():
    return ScriptedPrompter


@pytest.fixture
def read_tree():
    """Relative posix path -> bytes for every file under a root."""

    def _read(root: Path) -> dict[str, bytes]:
        return {
            p.relative_to(root).as_posix(): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
        }

    return _read
