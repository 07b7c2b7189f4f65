"""
Console collaborators for the orchestrator: a rich spinner reporter and a
typer-backed prompter.
"""

from __future__ import annotations

from collections.abc import Callable

import typer
from rich.console import Console
from rich.status import Status


class ConsoleReporter:
    """Spinner while a step runs, a check or cross mark when it ends."""

    def __init__(self, console: Console):
        self.console = console
        self._status: Status | None = None

    def _stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def start(self, message: str) -> None:
        self._stop()
        self._status = self.console.status(message)
        self._status.start()

    def succeed(self, message: str) -> None:
        self._stop()
        self.console.print(f"[green]✔[/green] {message}")

    def fail(self, message: str) -> None:
        self._stop()
        self.console.print(f"[red]✖[/red] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    def close(self) -> None:
        self._stop()


class TyperPrompter:
    """Prompts on the terminal; an aborted prompt counts as no answer."""

    def __init__(self, console: Console):
        self.console = console

    def ask(
        self,
        question: str,
        *,
        default: str | None = None,
        secret: bool = False,
        validate: Callable[[str], str | None] | None = None,
    ) -> str | None:
        while True:
            try:
                value = typer.prompt(
                    question,
                    default=default if default is not None else "",
                    hide_input=secret,
                    show_default=not secret and bool(default),
                )
            except typer.Abort:
                return None

            value = value.strip()
            problem = validate(value) if validate else None
            if problem is None:
                return value
            self.console.print(f"[red]{problem}[/red]")

    def confirm(self, question: str, *, default: bool = True) -> bool:
        try:
            return typer.confirm(question, default=default)
        except typer.Abort:
            return False
