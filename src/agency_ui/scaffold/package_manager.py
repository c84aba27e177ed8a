"""Package manager detection and command syntax.

Detection inspects lockfiles only. Command builders translate an intent
(add packages, run a one-off tool) into the syntax of a given manager.
"""

from __future__ import annotations

from pathlib import Path

from agency_ui.models.target import PackageManager

# Lockfile markers in priority order: first match wins.
LOCKFILES: list[tuple[str, PackageManager]] = [
    ("pnpm-lock.yaml", PackageManager.pnpm),
    ("yarn.lock", PackageManager.yarn),
    ("package-lock.json", PackageManager.npm),
]


def detect_package_manager(project_dir: Path) -> PackageManager:
    """Return the package manager whose lockfile is present in project_dir.

    Never raises: a missing directory or a directory without any lockfile
    both yield npm.
    """
    for filename, manager in LOCKFILES:
        try:
            if (project_dir / filename).is_file():
                return manager
        except OSError:
            continue
    return PackageManager.npm


def install_command(manager: PackageManager) -> str:
    """Command that installs everything declared in package.json."""
    return f"{manager.value} install"


def add_command(manager: PackageManager, packages: list[str], dev: bool = False) -> str:
    """Command that adds packages to the project."""
    if manager == PackageManager.npm:
        base = "npm install -D" if dev else "npm install"
    else:
        base = f"{manager.value} add -D" if dev else f"{manager.value} add"
    return f"{base} {' '.join(packages)}"


def exec_command(manager: PackageManager, tool: str) -> str:
    """Command that runs a package binary without adding it to the project.

    Only pnpm gets its own runner. Yarn classic, which the base project
    pins, has no ``dlx``, so yarn projects go through npx like npm ones.
    """
    if manager == PackageManager.pnpm:
        return f"pnpm dlx {tool}"
    return f"npx {tool}"
