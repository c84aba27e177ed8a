"""agency-ui init -- create a project and run every setup step.

Also hosts ``run_steps``, the glue shared by all commands: load config,
build the step context, run the pipeline, render the summary, and map
the outcome to an exit code.
"""

from __future__ import annotations

from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from agency_ui.cli.output import render_next_steps, render_summary
from agency_ui.models.config import ScaffoldConfig, load_scaffold_config
from agency_ui.models.step import PipelineResult
from agency_ui.scaffold.pipeline import run_pipeline
from agency_ui.scaffold.questions import DefaultsPrompter, Prompter, RichPrompter
from agency_ui.scaffold.runner import CommandRunner
from agency_ui.scaffold.steps import PIPELINE
from agency_ui.scaffold.steps.base import SetupStep, StepContext

console = Console()


def _load_config(directory: Path) -> ScaffoldConfig:
    try:
        return load_scaffold_config(directory)
    except (ValidationError, yaml.YAMLError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=1)


def run_steps(
    steps: list[SetupStep],
    directory: str,
    yes: bool,
    dry_run: bool,
) -> tuple[PipelineResult, StepContext]:
    """Run steps against directory and exit non-zero if the run aborted.

    Args:
        steps: Step instances, in execution order.
        directory: Working directory from the command line.
        yes: Accept every default instead of prompting.
        dry_run: Print external commands instead of running them.

    Returns:
        The pipeline result and the context it ran in.

    Raises:
        typer.Exit: With code 1 if the pipeline aborted or config is invalid.
    """
    root = Path(directory).resolve()
    prompter: Prompter = DefaultsPrompter() if yes else RichPrompter()
    ctx = StepContext(
        project_path=root,
        prompter=prompter,
        runner=CommandRunner(dry_run=dry_run),
        config=_load_config(root),
    )

    result = run_pipeline(steps, ctx)
    render_summary(result, console)

    if result.exit_code != 0:
        raise typer.Exit(code=result.exit_code)
    return result, ctx


def init(
    directory: str = typer.Argument(".", help="Directory to create the project in"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept all defaults without prompting"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands instead of running them"),
) -> None:
    """Create a Next.js project and set up auth, shadcn/ui, Prisma, and fonts."""
    console.print("[bold]Welcome to Agency UI![/bold]")
    result, ctx = run_steps([step() for step in PIPELINE], directory, yes, dry_run)
    render_next_steps(result, ctx.package_manager, console)
