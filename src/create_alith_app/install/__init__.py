"""
Dependency installation with ordered fallback strategies.
"""

from __future__ import annotations

from .runner import (
    AttemptOutcome,
    AttemptResult,
    CommandExecutor,
    CommandResult,
    InstallReport,
    StrategyRunner,
    SubprocessExecutor,
    run_strategies,
)
from .strategies import (
    DEFAULT_STRATEGIES,
    NEXT_STEPS_COMMANDS,
    InstallationStrategy,
    manual_install_steps,
)

__all__ = [
    # Strategy table
    "InstallationStrategy",
    "DEFAULT_STRATEGIES",
    "manual_install_steps",
    "NEXT_STEPS_COMMANDS",
    # Runner
    "AttemptOutcome",
    "AttemptResult",
    "CommandExecutor",
    "CommandResult",
    "InstallReport",
    "StrategyRunner",
    "SubprocessExecutor",
    "run_strategies",
]
