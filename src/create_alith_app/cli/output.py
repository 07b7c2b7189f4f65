"""
Rendering of run reports: success screen, next steps, manual install guide.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..install.strategies import NEXT_STEPS_COMMANDS, manual_install_steps
from ..scaffold.descriptor import SECRET_ENV_VAR, SECRET_FILE
from ..scaffold.orchestrator import RunOutcome, RunReport

API_KEY_URL = "https://console.groq.com/keys"


def display_path(root: Path, cwd: Path | None = None) -> str:
    """Project path relative to the working directory when possible."""
    cwd = cwd or Path.cwd()
    try:
        relative = os.path.relpath(root, cwd)
    except ValueError:
        # Different drive on Windows
        return str(root)
    return relative if not relative.startswith("..") else str(root)


def _is_windows() -> bool:
    return sys.platform == "win32"


def render_fatal(console: Console, report: RunReport) -> None:
    if report.fatal_kind == "invalid_name":
        console.print(f"[red]{escape(report.message)}:[/red]")
        for violation in report.details:
            console.print(f"[red]  • {escape(violation)}[/red]")
        if report.hint:
            console.print(f"[dim]{escape(report.hint)}[/dim]")
    elif report.fatal_kind == "cancelled":
        console.print(f"[red]{escape(report.message)}[/red]")
    else:
        console.print(f"[red]Error: {escape(report.message)}[/red]")


def render_attempt_log(console: Console, report: RunReport) -> None:
    table = Table(title="Installation attempts")
    table.add_column("#", justify="right")
    table.add_column("Strategy", style="cyan")
    table.add_column("Result")
    table.add_column("Time", justify="right")
    table.add_column("Reason", overflow="fold")

    for index, attempt in enumerate(report.attempts, start=1):
        result = "[green]ok[/green]" if attempt.succeeded else "[red]failed[/red]"
        reason = ""
        if attempt.failure:
            last_line = "".join((attempt.reason or "").splitlines()[-1:])
            reason = escape(f"{attempt.failed_command}: {last_line}")
        table.add_row(str(index), attempt.strategy.label, result, f"{attempt.elapsed:.1f}s", reason)

    console.print(table)


def render_install_failure(console: Console, path: str) -> None:
    console.print()
    console.print("[red]All automatic installation methods failed.[/red]")
    console.print()
    console.print("[yellow]Manual Installation Guide:[/yellow]")
    console.print()
    console.print("1. Navigate to your project:")
    console.print(f"[cyan]   cd {path}[/cyan]")
    for number, (heading, commands) in enumerate(manual_install_steps(_is_windows()), start=2):
        console.print()
        console.print(f"{number}. {heading}:")
        for command in commands:
            console.print(f"[cyan]   {command}[/cyan]")
    console.print()
    console.print("[dim]Common causes: antivirus software, corporate firewalls, file locks[/dim]")


def render_success(console: Console, path: str) -> None:
    console.print()
    console.print("[green]All set! Your Alith AI app is ready to go![/green]")
    console.print()
    console.print("[yellow]Quick Start:[/yellow]")
    console.print()
    console.print("1. Navigate to your project:")
    console.print(f"[cyan]   cd {path}[/cyan]")
    console.print()
    console.print("2. Start development:")
    console.print("[cyan]   npm run dev[/cyan]")
    console.print()


def render_manual_steps(console: Console, report: RunReport, path: str) -> None:
    name = report.project.name if report.project else path
    console.print()
    console.print(f"[green]Success! Created[/green] [cyan]{name}[/cyan] [green]at[/green] [cyan]{path}[/cyan]")
    console.print()
    console.print("[yellow]Next Steps:[/yellow]")
    console.print()
    console.print("1. Navigate to your project:")
    console.print(f"[cyan]   cd {path}[/cyan]")
    console.print()
    console.print("2. Install dependencies:")
    console.print("[cyan]   npm install[/cyan]")
    if _is_windows():
        console.print()
        console.print("[dim]   If npm install fails on Windows:[/dim]")
        console.print("[dim]   • Run PowerShell as Administrator[/dim]")
        console.print("[dim]   • Clear cache: npm cache clean --force[/dim]")
        console.print("[dim]   • Avoid OneDrive folders for projects[/dim]")
    console.print()
    console.print("3. Start development:")
    console.print("[cyan]   npm run dev[/cyan]")
    console.print()
    console.print("[dim]Available commands:[/dim]")
    console.print()
    for command, description in NEXT_STEPS_COMMANDS:
        console.print(f"[cyan]  {command}[/cyan]")
        console.print(f"    {description}")
        console.print()

    if not report.has_secret:
        console.print(
            f"[yellow]Important: add your {SECRET_ENV_VAR} to the {SECRET_FILE} file "
            "before running the app![/yellow]"
        )
        console.print(f"[dim]   Get your free API key from: {API_KEY_URL}[/dim]")
        console.print()

    if _is_windows() and "onedrive" in str(Path.cwd()).lower():
        console.print("[yellow]Troubleshooting Tip:[/yellow]")
        console.print("[dim]   If you encounter EPERM errors during npm install,[/dim]")
        console.print("[dim]   try moving your project outside OneDrive or run:[/dim]")
        console.print("[cyan]   npm cache clean --force && npm install[/cyan]")
        console.print()


def render_report(console: Console, report: RunReport) -> None:
    """Print the terminal message for any report outcome."""
    if report.outcome is RunOutcome.FATAL:
        render_fatal(console, report)
        return

    path = display_path(report.project.root_path) if report.project else ""

    if report.outcome is RunOutcome.SUCCESS:
        render_success(console, path)
    else:
        if report.install_attempted:
            render_install_failure(console, path)
            console.print()
            render_attempt_log(console, report)
        render_manual_steps(console, report, path)

    console.print("[magenta]Happy coding with Alith AI![/magenta]")
    console.print()
