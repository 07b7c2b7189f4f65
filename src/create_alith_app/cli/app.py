"""
create-alith-app command line.

One command: scaffold an Alith AI chat app into a new directory, configure
it, and try to install its npm dependencies.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..core.config import load_settings
from ..core.errors import ConfigError
from ..core.logging import setup_logging
from ..scaffold.orchestrator import (
    NonInteractivePrompter,
    RunOutcome,
    Scaffolder,
    ScaffoldRequest,
)
from .console import ConsoleReporter, TyperPrompter
from .output import render_report

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="Create a new Alith AI chat app (React + Vite + Express).",
    add_completion=False,
    no_args_is_help=False,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"create-alith-app {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.command()
def create(
    project_name: str | None = typer.Argument(
        None, help="Project name; also the directory created (prompted for if omitted)"
    ),
    template: str | None = typer.Option(
        None, "--template", "-t", help="Template variant (defaults to the configured one)"
    ),
    no_install: bool = typer.Option(
        False, "--no-install", help="Skip dependency installation"
    ),
    api_key: str | None = typer.Option(
        None, "--api-key", envvar="GROQ_API_KEY", help="Groq API key written to .env"
    ),
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Never prompt; install unless --no-install"
    ),
    directory: Path | None = typer.Option(
        None,
        "--directory",
        "-d",
        help="Parent directory of the new project (defaults to current directory)",
        file_okay=False,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="TOML file with a [scaffold] table of settings",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Create a new Alith AI app.

    Examples:
        create-alith-app                          # Prompt for everything
        create-alith-app my-app                   # Prompt for key and install
        create-alith-app my-app -y --no-install   # Scaffold only, no prompts
        create-alith-app my-app --api-key sk-...  # Write .env directly
    """
    try:
        settings = load_settings(config)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    setup_logging("DEBUG" if verbose else settings.log_level)

    console.print()
    console.print("[cyan]Welcome to Alith AI App Generator![/cyan]")
    console.print()

    reporter = ConsoleReporter(console)
    prompter = NonInteractivePrompter() if yes else TyperPrompter(console)
    scaffolder = Scaffolder(reporter=reporter, prompter=prompter, settings=settings)

    request = ScaffoldRequest(
        name=project_name,
        directory=directory,
        template=template,
        secret=api_key,
        install=False if no_install else None,
        interactive=not yes,
    )

    try:
        report = scaffolder.run(request)
    finally:
        reporter.close()

    logger.debug("Run finished: %s (%s)", report.outcome.value, report.message)
    render_report(console, report)

    if report.outcome is RunOutcome.FATAL:
        raise typer.Exit(code=report.exit_code)


def main() -> None:
    app()
