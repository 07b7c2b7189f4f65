"""
The installation strategy table.

Strategies are ordered by how invasive they are: a plain install first,
then cache and registry resets, a clean CI install, relaxed peer
constraints and finally a forced install.
"""

from __future__ import annotations

from dataclasses import dataclass

NPM_REGISTRY = "https://registry.npmjs.org/"


@dataclass(frozen=True)
class InstallationStrategy:
    """A named sequence of shell commands attempted as one unit."""

    label: str
    commands: tuple[str, ...]
    rationale: str

    def __post_init__(self) -> None:
        if not self.commands:
            raise ValueError(f"Strategy '{self.label}' has no commands")


DEFAULT_STRATEGIES: tuple[InstallationStrategy, ...] = (
    InstallationStrategy(
        label="Standard npm install",
        commands=("npm install",),
        rationale="Using standard npm installation",
    ),
    InstallationStrategy(
        label="Clean install with cache clear",
        commands=("npm cache clean --force", "npm install"),
        rationale="Clearing cache and reinstalling",
    ),
    InstallationStrategy(
        label="Registry reset with clean install",
        commands=(
            f"npm config set registry {NPM_REGISTRY}",
            "npm cache clean --force",
            "npm install",
        ),
        rationale="Resetting registry and cache",
    ),
    InstallationStrategy(
        label="CI clean install",
        commands=("npm ci",),
        rationale="Using npm ci for clean install",
    ),
    InstallationStrategy(
        label="Legacy peer deps install",
        commands=("npm install --legacy-peer-deps",),
        rationale="Installing with legacy peer dependencies",
    ),
    InstallationStrategy(
        label="Force install",
        commands=("npm install --force",),
        rationale="Force installing all packages",
    ),
)

_UNIX_CLEANUP = ("rm -rf node_modules", "rm -f package-lock.json")
_WINDOWS_CLEANUP = (
    "Remove-Item node_modules -Recurse -Force -ErrorAction SilentlyContinue",
    "Remove-Item package-lock.json -Force -ErrorAction SilentlyContinue",
)


def manual_install_steps(windows: bool = False) -> list[tuple[str, tuple[str, ...]]]:
    """
    Fallback guide shown when every strategy failed.

    Returns:
        (heading, commands) pairs in the order the user should try them
    """
    cleanup = _WINDOWS_CLEANUP if windows else _UNIX_CLEANUP
    return [
        ("Try these commands in order", ("npm cache clean --force", *cleanup, "npm install")),
        ("If still failing, try", ("npm install --legacy-peer-deps",)),
        ("Or use Yarn instead", ("npm install -g yarn", "yarn install")),
    ]


# npm scripts of the generated project and what they do
NEXT_STEPS_COMMANDS: tuple[tuple[str, str], ...] = (
    ("npm run dev", "Starts both frontend and backend development servers."),
    ("npm run frontend", "Starts only the React frontend development server."),
    ("npm run server", "Starts only the Alith AI backend server."),
    ("npm run build", "Builds the app for production."),
)
