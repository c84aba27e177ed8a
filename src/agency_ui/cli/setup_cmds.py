"""Single-step commands: run one setup step against a directory.

``create-next-project`` takes the parent directory the project is created
in; every other command takes an existing project root.
"""

from __future__ import annotations

import typer

from agency_ui.cli.init_cmd import run_steps
from agency_ui.scaffold.steps.auth import AuthStep
from agency_ui.scaffold.steps.create_project import CreateProjectStep
from agency_ui.scaffold.steps.prisma import PrismaStep
from agency_ui.scaffold.steps.shadcn import ShadcnStep
from agency_ui.scaffold.steps.ui import UIStep

_YES = typer.Option(False, "--yes", "-y", help="Accept all defaults without prompting")
_DRY_RUN = typer.Option(False, "--dry-run", help="Print commands instead of running them")


def create_next_project(
    directory: str = typer.Argument(".", help="Directory to create the project in"),
    yes: bool = _YES,
    dry_run: bool = _DRY_RUN,
) -> None:
    """Create a new Next.js project."""
    run_steps([CreateProjectStep()], directory, yes, dry_run)


def setup_auth(
    directory: str = typer.Argument(".", help="Project root"),
    yes: bool = _YES,
    dry_run: bool = _DRY_RUN,
) -> None:
    """Setup authentication (Better Auth or NextAuth.js)."""
    run_steps([AuthStep()], directory, yes, dry_run)


def setup_shadcn(
    directory: str = typer.Argument(".", help="Project root"),
    yes: bool = _YES,
    dry_run: bool = _DRY_RUN,
) -> None:
    """Setup shadcn/ui."""
    run_steps([ShadcnStep()], directory, yes, dry_run)


def setup_prisma(
    directory: str = typer.Argument(".", help="Project root"),
    yes: bool = _YES,
    dry_run: bool = _DRY_RUN,
) -> None:
    """Setup Prisma ORM."""
    run_steps([PrismaStep()], directory, yes, dry_run)


def setup_ui(
    directory: str = typer.Argument(".", help="Project root"),
    yes: bool = _YES,
    dry_run: bool = _DRY_RUN,
) -> None:
    """Setup fonts, root layout, and global styles."""
    run_steps([UIStep()], directory, yes, dry_run)
