"""
Scaffolding orchestrator.

Sequences name validation, the directory check, materialization, the
metadata patches and the optional install, and folds the outcome into a
RunReport. Console output and prompting are injected; this module never
prints.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Protocol

from ..core.config import ScaffoldSettings
from ..core.errors import (
    AlreadyExistsError,
    InvalidNameError,
    MaterializeError,
    MetadataPatchError,
    OperationCancelled,
    ScaffoldError,
)
from ..install.runner import AttemptResult, InstallReport, StrategyRunner
from ..install.strategies import DEFAULT_STRATEGIES, InstallationStrategy
from .materializer import MaterializedFile, ProjectSpec, materialize
from .metadata import patch_project_name, patch_secret
from .payloads import get_template
from .validation import sanitize_name, validate_project_name

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "my-alith-app"


# =============================================================================
# Collaborators
# =============================================================================


class Reporter(Protocol):
    """Progress sink (spinner, log, recorder...)."""

    def start(self, message: str) -> None: ...

    def succeed(self, message: str) -> None: ...

    def fail(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class Prompter(Protocol):
    """Asks the user for missing inputs."""

    def ask(
        self,
        question: str,
        *,
        default: str | None = None,
        secret: bool = False,
        validate: Callable[[str], str | None] | None = None,
    ) -> str | None: ...

    def confirm(self, question: str, *, default: bool = True) -> bool: ...


class NullReporter:
    """Reporter that drops everything."""

    def start(self, message: str) -> None:
        pass

    def succeed(self, message: str) -> None:
        pass

    def fail(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass


class NonInteractivePrompter:
    """Prompter for runs where nobody is there to answer."""

    def ask(
        self,
        question: str,
        *,
        default: str | None = None,
        secret: bool = False,
        validate: Callable[[str], str | None] | None = None,
    ) -> str | None:
        return None

    def confirm(self, question: str, *, default: bool = True) -> bool:
        return default


# =============================================================================
# Request / report
# =============================================================================


class ScaffoldState(str, Enum):
    START = "start"
    NAME_RESOLVED = "name_resolved"
    DIRECTORY_CHECKED = "directory_checked"
    MATERIALIZED = "materialized"
    METADATA_PATCHED = "metadata_patched"
    INSTALL_SKIPPED = "install_skipped"
    INSTALL_ATTEMPTED = "install_attempted"
    DONE = "done"


class RunOutcome(str, Enum):
    SUCCESS = "success"
    MANUAL_STEPS_REQUIRED = "manual_steps_required"
    FATAL = "fatal"


@dataclass(frozen=True)
class ScaffoldRequest:
    """
    Inputs of one scaffolding run.

    Attributes:
        name: Project name; prompted for when missing and interactive
        directory: Parent directory of the project (defaults to cwd)
        template: Template variant; settings default when None
        secret: Groq API key; prompted for when missing and interactive
        install: Auto-install choice; None means ask (or yes when non-interactive)
        interactive: Whether the prompter may be used
    """

    name: str | None = None
    directory: Path | None = None
    template: str | None = None
    secret: str | None = None
    install: bool | None = None
    interactive: bool = True


@dataclass
class RunReport:
    """Terminal outcome of a run, for the presentation layer."""

    outcome: RunOutcome
    message: str = ""
    fatal_kind: str | None = None
    details: tuple[str, ...] = ()
    hint: str | None = None
    project: ProjectSpec | None = None
    files: list[MaterializedFile] = field(default_factory=list)
    install_attempted: bool = False
    winning_strategy: InstallationStrategy | None = None
    attempts: list[AttemptResult] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 1 if self.outcome is RunOutcome.FATAL else 0

    @property
    def has_secret(self) -> bool:
        return bool(self.project and self.project.secret)


def _first_violation(candidate: str) -> str | None:
    result = validate_project_name(candidate)
    return None if result.ok else result.violations[0]


# =============================================================================
# Orchestrator
# =============================================================================


class Scaffolder:
    """
    Runs one scaffolding pass from name to install.

    Never retries materialization or validation; the only retries are the
    install strategies inside the runner.
    """

    def __init__(
        self,
        reporter: Reporter | None = None,
        prompter: Prompter | None = None,
        settings: ScaffoldSettings | None = None,
        runner: StrategyRunner | None = None,
        strategies: Sequence[InstallationStrategy] = DEFAULT_STRATEGIES,
    ):
        self.reporter = reporter or NullReporter()
        self.prompter = prompter or NonInteractivePrompter()
        self.settings = settings or ScaffoldSettings()
        self.runner = runner or StrategyRunner(
            timeout=self.settings.command_timeout,
            backoff=self.settings.retry_backoff,
        )
        self.strategies = tuple(strategies)
        self.state = ScaffoldState.START

    def run(self, request: ScaffoldRequest) -> RunReport:
        """
        Execute the run and report its outcome.

        Fatal conditions are returned as a FATAL report, never raised.
        """
        self.state = ScaffoldState.START
        try:
            return self._run(request)
        except InvalidNameError as e:
            return RunReport(
                RunOutcome.FATAL,
                message=e.message,
                fatal_kind=e.kind,
                details=e.violations,
                hint=f"Try '{sanitize_name(e.name)}' instead",
            )
        except ScaffoldError as e:
            logger.debug("Run stopped in state %s: %s", self.state.value, e)
            return RunReport(RunOutcome.FATAL, message=str(e), fatal_kind=e.kind)

    def _run(self, request: ScaffoldRequest) -> RunReport:
        project = self._resolve_project(request)
        template = get_template(request.template or self.settings.default_template)

        if project.root_path.exists():
            raise AlreadyExistsError(f"Directory {project.name} already exists!", project.root_path)
        self.state = ScaffoldState.DIRECTORY_CHECKED

        if project.secret is None and request.interactive:
            answer = self.prompter.ask(
                "Enter your Groq API key (optional, you can add it later):", secret=True
            )
            project = replace(project, secret=(answer or "").strip() or None)

        self.reporter.start("Creating template...")
        try:
            files = materialize(template, project)
        except MaterializeError:
            self.reporter.fail("Failed to create template")
            raise
        self.reporter.succeed("Template created")
        self.state = ScaffoldState.MATERIALIZED

        self._patch_metadata(project)
        self.state = ScaffoldState.METADATA_PATCHED

        report = RunReport(
            RunOutcome.MANUAL_STEPS_REQUIRED,
            message="Project created; install dependencies to finish",
            project=project,
            files=files,
        )

        install = request.install
        if install is None:
            install = (
                self.prompter.confirm(
                    "Would you like to install dependencies now? (Recommended)", default=True
                )
                if request.interactive
                else True
            )

        if not install:
            self.state = ScaffoldState.INSTALL_SKIPPED
        else:
            self.state = ScaffoldState.INSTALL_ATTEMPTED
            self._install(project, report)

        self.state = ScaffoldState.DONE
        return report

    def _resolve_project(self, request: ScaffoldRequest) -> ProjectSpec:
        name = request.name
        if not name and request.interactive:
            name = self.prompter.ask(
                "What is your project name?",
                default=DEFAULT_PROJECT_NAME,
                validate=_first_violation,
            )
        if not name:
            raise OperationCancelled("Operation cancelled.")

        validation = validate_project_name(name)
        if not validation.ok:
            raise InvalidNameError(name, validation.violations)

        self.state = ScaffoldState.NAME_RESOLVED
        return ProjectSpec.create(name, request.directory, request.secret)

    def _patch_metadata(self, project: ProjectSpec) -> None:
        self.reporter.start("Configuring project...")
        try:
            patch_project_name(project.root_path, project.name)
        except MetadataPatchError:
            self.reporter.fail("Failed to configure project")
            raise

        try:
            patch_secret(project.root_path, project.secret)
        except OSError as e:
            logger.debug("Secret file not written: %s", e)

        self.reporter.succeed("Project configured")

    def _install(self, project: ProjectSpec, report: RunReport) -> None:
        def on_start(strategy: InstallationStrategy, index: int, total: int) -> None:
            self.reporter.start(f"{strategy.rationale}...")

        def on_finish(result: AttemptResult, index: int, total: int) -> None:
            if result.succeeded:
                self.reporter.succeed("Dependencies installed successfully!")
                return
            self.reporter.fail(f"{result.strategy.label} failed")
            if index < total:
                self.reporter.info(f"Trying alternative method ({index + 1}/{total})...")

        install_report: InstallReport = self.runner.run(
            self.strategies, project.root_path, on_start=on_start, on_finish=on_finish
        )

        report.install_attempted = True
        report.attempts = list(install_report.attempts)
        report.winning_strategy = install_report.succeeded_strategy

        if install_report.all_failed:
            error = install_report.error
            report.message = error.message if error else "Automatic installation failed"
        else:
            report.outcome = RunOutcome.SUCCESS
            report.message = "Dependencies installed"
