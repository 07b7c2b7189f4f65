"""
Installation strategy runner.

Runs the strategy table in order against the project directory and stops at
the first strategy whose commands all succeed. Every attempt becomes an
AttemptResult value; command failures never escape as exceptions.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..core.config import DEFAULT_COMMAND_TIMEOUT, DEFAULT_RETRY_BACKOFF
from ..core.errors import CommandFailure, StrategiesExhausted
from .strategies import InstallationStrategy

logger = logging.getLogger(__name__)

# Keep the tail of noisy npm output; the end is where the error is
MAX_REASON_CHARS = 2000

TIMEOUT_REASON = "timeout"


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one shell command."""

    command: str
    ok: bool
    reason: str | None = None
    elapsed: float = 0.0


@runtime_checkable
class CommandExecutor(Protocol):
    """Runs one command in a directory, bounded by a timeout."""

    def run(self, command: str, cwd: Path, timeout: float) -> CommandResult:
        """Run the command and report how it went."""
        ...


def _failure_reason(completed: subprocess.CompletedProcess[str]) -> str:
    text = (completed.stderr or "").strip() or (completed.stdout or "").strip()
    if not text:
        return f"exit status {completed.returncode}"
    if len(text) > MAX_REASON_CHARS:
        text = "..." + text[-MAX_REASON_CHARS:]
    return text


class SubprocessExecutor:
    """
    Execute commands with :func:`subprocess.run`.

    The executable is resolved with :func:`shutil.which`, so ``npm`` maps to
    ``npm.cmd`` on Windows without going through a shell.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock

    def run(self, command: str, cwd: Path, timeout: float) -> CommandResult:
        argv = shlex.split(command)
        if not argv:
            return CommandResult(command, ok=False, reason="empty command")

        executable = shutil.which(argv[0])
        if executable is None:
            return CommandResult(command, ok=False, reason=f"command not found: {argv[0]}")

        logger.debug("Running: %s (cwd=%s, timeout=%ss)", command, cwd, timeout)
        started = self._clock()
        try:
            completed = subprocess.run(
                [executable, *argv[1:]],
                cwd=cwd,
                capture_output=True,
                text=True,
                # npm output is UTF-8 whatever the console code page says
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command, ok=False, reason=TIMEOUT_REASON, elapsed=self._clock() - started
            )
        except OSError as e:
            return CommandResult(
                command, ok=False, reason=str(e.strerror or e), elapsed=self._clock() - started
            )

        elapsed = self._clock() - started
        if completed.returncode != 0:
            return CommandResult(command, ok=False, reason=_failure_reason(completed), elapsed=elapsed)
        return CommandResult(command, ok=True, elapsed=elapsed)


@dataclass(frozen=True)
class AttemptResult:
    """How one strategy went."""

    strategy: InstallationStrategy
    outcome: AttemptOutcome
    elapsed: float
    failure: CommandFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS

    @property
    def reason(self) -> str | None:
        return self.failure.reason if self.failure else None

    @property
    def failed_command(self) -> str | None:
        return self.failure.command if self.failure else None


@dataclass
class InstallReport:
    """
    Aggregate outcome of a runner pass.

    Attributes:
        attempts: One AttemptResult per strategy actually tried, in table order
    """

    attempts: list[AttemptResult] = field(default_factory=list)

    @property
    def succeeded_strategy(self) -> InstallationStrategy | None:
        if self.attempts and self.attempts[-1].succeeded:
            return self.attempts[-1].strategy
        return None

    @property
    def all_failed(self) -> bool:
        return self.succeeded_strategy is None

    @property
    def failures(self) -> list[AttemptResult]:
        return [a for a in self.attempts if not a.succeeded]

    @property
    def error(self) -> StrategiesExhausted | None:
        """The exhaustion condition as a value, for reporting only."""
        if not self.all_failed:
            return None
        return StrategiesExhausted(
            f"All {len(self.attempts)} automatic installation strategies failed"
        )


AttemptStarted = Callable[[InstallationStrategy, int, int], None]
AttemptFinished = Callable[[AttemptResult, int, int], None]


class StrategyRunner:
    """
    Try installation strategies in order until one succeeds.

    Never reorders or skips strategies. Within a strategy the first failing
    command ends the attempt. A fixed backoff separates failed attempts.
    """

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        *,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        backoff: float = DEFAULT_RETRY_BACKOFF,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.executor = executor or SubprocessExecutor(clock)
        self.timeout = timeout
        self.backoff = backoff
        self._sleep = sleep
        self._clock = clock

    def run(
        self,
        strategies: Sequence[InstallationStrategy],
        cwd: Path,
        on_start: AttemptStarted | None = None,
        on_finish: AttemptFinished | None = None,
    ) -> InstallReport:
        """
        Run strategies against ``cwd``.

        Args:
            strategies: Ordered strategy table
            cwd: Project directory every command runs in
            on_start: Optional callback (strategy, index, total) before each attempt
            on_finish: Optional callback (result, index, total) after each attempt

        Returns:
            InstallReport with the attempt log
        """
        report = InstallReport()
        total = len(strategies)

        for index, strategy in enumerate(strategies, start=1):
            if on_start:
                on_start(strategy, index, total)

            result = self._attempt(strategy, cwd)
            report.attempts.append(result)

            if on_finish:
                on_finish(result, index, total)

            if result.succeeded:
                logger.info("Dependencies installed with '%s'", strategy.label)
                return report

            logger.warning(
                "Strategy %d/%d '%s' failed at '%s': %s",
                index,
                total,
                strategy.label,
                result.failed_command,
                result.reason,
            )
            if index < total and self.backoff > 0:
                self._sleep(self.backoff)

        return report

    def _attempt(self, strategy: InstallationStrategy, cwd: Path) -> AttemptResult:
        started = self._clock()

        for command in strategy.commands:
            try:
                outcome = self.executor.run(command, cwd, self.timeout)
            except CommandFailure as failure:
                return AttemptResult(
                    strategy, AttemptOutcome.FAILURE, self._clock() - started, failure
                )

            if not outcome.ok:
                failure = CommandFailure(command, outcome.reason or "failed")
                return AttemptResult(
                    strategy, AttemptOutcome.FAILURE, self._clock() - started, failure
                )

        return AttemptResult(strategy, AttemptOutcome.SUCCESS, self._clock() - started)


def run_strategies(
    strategies: Sequence[InstallationStrategy],
    cwd: Path,
    *,
    executor: CommandExecutor | None = None,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
    backoff: float = DEFAULT_RETRY_BACKOFF,
    sleep: Callable[[float], None] = time.sleep,
) -> InstallReport:
    """Run a strategy table once with a fresh runner."""
    runner = StrategyRunner(executor, timeout=timeout, backoff=backoff, sleep=sleep)
    return runner.run(strategies, cwd)
