"""Tests for the installation strategy runner."""

from __future__ import annotations

import shlex
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from create_alith_app.core.errors import CommandFailure
from create_alith_app.install.runner import (
    TIMEOUT_REASON,
    CommandResult,
    StrategyRunner,
    SubprocessExecutor,
    run_strategies,
)
from create_alith_app.install.strategies import (
    DEFAULT_STRATEGIES,
    InstallationStrategy,
    manual_install_steps,
)


def _runner(executor, sleeps: list[float], backoff: float = 1.0) -> StrategyRunner:
    return StrategyRunner(executor, timeout=120.0, backoff=backoff, sleep=sleeps.append)


class TestStrategyTable:
    def test_six_strategies_in_order(self) -> None:
        labels = [s.label for s in DEFAULT_STRATEGIES]
        assert labels[0] == "Standard npm install"
        assert labels[-1] == "Force install"
        assert len(labels) == 6

    def test_compound_strategies_are_split(self) -> None:
        assert DEFAULT_STRATEGIES[1].commands == ("npm cache clean --force", "npm install")
        assert len(DEFAULT_STRATEGIES[2].commands) == 3

    def test_empty_strategy_rejected(self) -> None:
        with pytest.raises(ValueError):
            InstallationStrategy(label="nothing", commands=(), rationale="")

    def test_manual_steps_per_platform(self) -> None:
        unix = manual_install_steps(windows=False)[0][1]
        windows = manual_install_steps(windows=True)[0][1]
        assert "rm -rf node_modules" in unix
        assert any(c.startswith("Remove-Item node_modules") for c in windows)


class TestStrategyRunner:
    def test_first_strategy_succeeds(self, executor, sleeps, tmp_path: Path) -> None:
        report = _runner(executor, sleeps).run(DEFAULT_STRATEGIES, tmp_path)

        assert report.succeeded_strategy is DEFAULT_STRATEGIES[0]
        assert len(report.attempts) == 1
        assert report.failures == []
        assert executor.commands == ["npm install"]
        assert sleeps == []

    def test_fail_then_succeed(self, executor, sleeps, tmp_path: Path) -> None:
        strategies = (
            InstallationStrategy("first", ("npm broken",), "trying first"),
            InstallationStrategy("second", ("npm install",), "trying second"),
            InstallationStrategy("third", ("npm never",), "never reached"),
        )
        executor.failing["npm broken"] = "ERESOLVE"

        report = _runner(executor, sleeps).run(strategies, tmp_path)

        assert report.succeeded_strategy is strategies[1]
        assert len(report.attempts) == 2
        assert len(report.failures) == 1
        assert report.failures[0].reason == "ERESOLVE"
        assert executor.commands == ["npm broken", "npm install"]
        assert sleeps == [1.0]

    def test_all_fail(self, executor, sleeps, tmp_path: Path) -> None:
        for strategy in DEFAULT_STRATEGIES:
            for command in strategy.commands:
                executor.failing[command] = "EPERM"

        report = _runner(executor, sleeps).run(DEFAULT_STRATEGIES, tmp_path)

        assert report.all_failed
        assert report.succeeded_strategy is None
        assert [a.strategy for a in report.attempts] == list(DEFAULT_STRATEGIES)
        # Backoff between failures only, not after the last one
        assert sleeps == [1.0] * (len(DEFAULT_STRATEGIES) - 1)
        assert report.error is not None
        assert report.error.kind == "all_strategies_exhausted"

    def test_failing_command_aborts_strategy(self, executor, sleeps, tmp_path: Path) -> None:
        strategy = InstallationStrategy("chain", ("step one", "step two", "step three"), "chain")
        executor.failing["step two"] = "exit status 1"

        report = _runner(executor, sleeps).run([strategy], tmp_path)

        assert executor.commands == ["step one", "step two"]
        attempt = report.attempts[0]
        assert attempt.failed_command == "step two"
        assert attempt.reason == "exit status 1"

    def test_commands_get_cwd_and_timeout(self, executor, sleeps, tmp_path: Path) -> None:
        _runner(executor, sleeps).run(DEFAULT_STRATEGIES[:1], tmp_path)
        assert executor.calls == [("npm install", tmp_path, 120.0)]

    def test_zero_backoff_never_sleeps(self, executor, sleeps, tmp_path: Path) -> None:
        executor.failing["npm install"] = "boom"
        _runner(executor, sleeps, backoff=0).run(DEFAULT_STRATEGIES[:1] * 2, tmp_path)
        assert sleeps == []

    def test_raised_command_failure_is_captured(self, sleeps, tmp_path: Path) -> None:
        executor = MagicMock()
        executor.run.side_effect = CommandFailure("npm install", "spawn error")

        report = _runner(executor, sleeps).run(DEFAULT_STRATEGIES[:1], tmp_path)

        assert report.all_failed
        assert report.attempts[0].reason == "spawn error"

    def test_callbacks(self, executor, sleeps, tmp_path: Path) -> None:
        started: list[tuple[str, int, int]] = []
        finished: list[tuple[bool, int, int]] = []
        executor.failing["npm install"] = "boom"

        _runner(executor, sleeps).run(
            DEFAULT_STRATEGIES[:2],
            tmp_path,
            on_start=lambda s, i, n: started.append((s.label, i, n)),
            on_finish=lambda r, i, n: finished.append((r.succeeded, i, n)),
        )

        assert started == [(DEFAULT_STRATEGIES[0].label, 1, 2), (DEFAULT_STRATEGIES[1].label, 2, 2)]
        assert finished == [(False, 1, 2), (False, 2, 2)]

    def test_run_strategies_helper(self, executor, sleeps, tmp_path: Path) -> None:
        report = run_strategies(DEFAULT_STRATEGIES, tmp_path, executor=executor, sleep=sleeps.append)
        assert report.succeeded_strategy is DEFAULT_STRATEGIES[0]


class TestSubprocessExecutor:
    def test_command_not_found(self, tmp_path: Path) -> None:
        with patch("create_alith_app.install.runner.shutil.which", return_value=None):
            result = SubprocessExecutor().run("npm install", tmp_path, 5)
        assert result == CommandResult("npm install", ok=False, reason="command not found: npm")

    def test_timeout(self, tmp_path: Path) -> None:
        with (
            patch("create_alith_app.install.runner.shutil.which", return_value="/usr/bin/npm"),
            patch(
                "create_alith_app.install.runner.subprocess.run",
                side_effect=subprocess.TimeoutExpired("npm", 5),
            ),
        ):
            result = SubprocessExecutor().run("npm install", tmp_path, 5)
        assert not result.ok
        assert result.reason == TIMEOUT_REASON

    def test_nonzero_exit_uses_stderr(self, tmp_path: Path) -> None:
        completed = subprocess.CompletedProcess(["npm"], 1, stdout="", stderr="npm ERR! code E404\n")
        with (
            patch("create_alith_app.install.runner.shutil.which", return_value="/usr/bin/npm"),
            patch("create_alith_app.install.runner.subprocess.run", return_value=completed) as run,
        ):
            result = SubprocessExecutor().run("npm install --force", tmp_path, 30)

        assert result.reason == "npm ERR! code E404"
        args, kwargs = run.call_args
        assert args[0] == ["/usr/bin/npm", "install", "--force"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["timeout"] == 30

    def test_silent_failure_reports_exit_status(self, tmp_path: Path) -> None:
        completed = subprocess.CompletedProcess(["npm"], 7, stdout="", stderr="")
        with (
            patch("create_alith_app.install.runner.shutil.which", return_value="/usr/bin/npm"),
            patch("create_alith_app.install.runner.subprocess.run", return_value=completed),
        ):
            result = SubprocessExecutor().run("npm ci", tmp_path, 30)
        assert result.reason == "exit status 7"

    def test_success(self, tmp_path: Path) -> None:
        completed = subprocess.CompletedProcess(["npm"], 0, stdout="added 10 packages", stderr="")
        with (
            patch("create_alith_app.install.runner.shutil.which", return_value="/usr/bin/npm"),
            patch("create_alith_app.install.runner.subprocess.run", return_value=completed),
        ):
            result = SubprocessExecutor().run("npm install", tmp_path, 30)
        assert result.ok
        assert result.reason is None


class TestUndecodableOutput:
    def test_invalid_utf8_output_is_a_failed_attempt(self, sleeps, tmp_path: Path) -> None:
        noisy = shlex.join(
            [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe'); sys.exit(1)"]
        )
        quiet = shlex.join([sys.executable, "-c", "pass"])
        strategies = (
            InstallationStrategy("garbled", (noisy,), "garbled output"),
            InstallationStrategy("clean", (quiet,), "clean exit"),
        )

        report = StrategyRunner(timeout=60.0, backoff=0.5, sleep=sleeps.append).run(
            strategies, tmp_path
        )

        assert report.succeeded_strategy is strategies[1]
        assert not report.attempts[0].succeeded
        assert "\ufffd" in report.attempts[0].reason
        assert sleeps == [0.5]

    def test_output_decoded_as_utf8_with_replacement(self, tmp_path: Path) -> None:
        completed = subprocess.CompletedProcess(["npm"], 0, stdout="", stderr="")
        with (
            patch("create_alith_app.install.runner.shutil.which", return_value="/usr/bin/npm"),
            patch("create_alith_app.install.runner.subprocess.run", return_value=completed) as run,
        ):
            SubprocessExecutor().run("npm install", tmp_path, 30)

        kwargs = run.call_args.kwargs
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["errors"] == "replace"
