"""Rich terminal output for pipeline results.

Renders the per-step summary table printed at the end of every command
and the next-steps hint shown after a successful ``init``.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from agency_ui.models.step import PipelineOutcome, PipelineResult
from agency_ui.models.target import PackageManager

# Step status -> (symbol, Rich markup style)
_STATUS_STYLES: dict[str, tuple[str, str]] = {
    "completed": ("✓ completed", "green"),
    "skipped": ("- skipped", "dim"),
    "cancelled": ("✗ cancelled", "yellow"),
    "failed": ("✗ failed", "red"),
}

_OUTCOME_STYLES: dict[PipelineOutcome, tuple[str, str]] = {
    PipelineOutcome.complete: ("Setup complete", "bold green"),
    PipelineOutcome.complete_with_warnings: ("Setup complete with warnings", "bold yellow"),
    PipelineOutcome.aborted: ("Setup aborted", "bold red"),
}


def render_summary(result: PipelineResult, console: Console) -> None:
    """Render one row per step that ran, followed by the overall outcome.

    Args:
        result: The PipelineResult to display.
        console: Rich Console for output.
    """
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 2))
    table.add_column("Step", style="bold")
    table.add_column("Status")
    table.add_column("Detail", style="dim")

    for step in result.steps:
        symbol, style = _STATUS_STYLES.get(step.status.value, (step.status.value, "bold"))
        table.add_row(step.name, f"[{style}]{symbol}[/{style}]", step.detail)

    console.print()
    console.print(table)

    label, style = _OUTCOME_STYLES[result.outcome]
    console.print(f"[{style}]{label}[/{style}]")


def render_next_steps(result: PipelineResult, manager: PackageManager, console: Console) -> None:
    """Print how to start the dev server for a freshly created project."""
    if result.project_path is None:
        return
    run_dev = "npm run dev" if manager == PackageManager.npm else f"{manager.value} dev"
    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  cd {result.project_path}")
    console.print(f"  {run_dev}")
