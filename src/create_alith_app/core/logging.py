"""
Logging setup for the scaffolder.

Modules log through ``logging.getLogger(__name__)``; the CLI calls
:func:`setup_logging` once to attach a console handler.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from typing import TextIO

ROOT_LOGGER = "create_alith_app"


def supports_color(stream: TextIO) -> bool:
    """Colors only for an interactive stream, and never when NO_COLOR is set."""
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    DIM = "\033[2m"
    DEBUG = "\033[36m"
    INFO = "\033[32m"
    WARNING = "\033[33m"
    ERROR = "\033[31m"


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.INFO: Colors.INFO,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.ERROR,
    }

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        component = record.name.rsplit(".", 1)[-1]

        level_name = record.levelname
        if self.use_color:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            prefix = (
                f"{Colors.DIM}{timestamp}{Colors.RESET} [{component}] "
                f"{color}{level_name}{Colors.RESET}:"
            )
        else:
            prefix = f"[{timestamp}] [{component}] {level_name}:"

        message = f"{prefix} {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """
    Configure the package logger with a single stderr handler.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Minimum log level (int or name such as "DEBUG")

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ConsoleFormatter(use_color=supports_color(sys.stderr)))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    return root_logger
