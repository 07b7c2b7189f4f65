"""
create-alith-app CLI package.

- app.py: typer application and the ``create`` command
- console.py: rich spinner reporter and typer prompter
- output.py: report rendering (next steps, manual install guide)
"""

from .app import app, main, version_callback

__all__ = [
    "app",
    "main",
    "version_callback",
]
