"""Step orchestration: run setup steps in order and decide when to stop.

The pipeline moves Idle -> Running(step 1) -> ... -> Complete. A step that
does not finish cleanly either aborts the run (abort policy) or leaves it
"complete with warnings" (continue policy). Nothing is rolled back: files
written before a failure stay on disk.

Steps run strictly one after another. Later steps read files earlier ones
wrote, and package-manager commands must not overlap in one project.
"""

from __future__ import annotations

from rich.console import Console

from agency_ui.models.step import (
    FatalityPolicy,
    PipelineOutcome,
    PipelineResult,
    StepResult,
)
from agency_ui.scaffold.steps.base import SetupStep, StepContext

console = Console()


def run_pipeline(steps: list[SetupStep], ctx: StepContext) -> PipelineResult:
    """Execute steps in order against ctx.

    The base project step rebinds ctx to the directory it creates, so the
    steps after it operate inside that project.

    Args:
        steps: Step instances, in execution order.
        ctx: Shared context passed to every step.

    Returns:
        PipelineResult with one StepResult per step that ran.
    """
    results: list[StepResult] = []
    project_path = None

    for step in steps:
        result = step.execute(ctx)
        results.append(result)

        if result.project_path is not None:
            project_path = result.project_path

        if result.ok:
            continue

        if step.policy == FatalityPolicy.abort:
            console.print(
                f"\n[bold red]{step.title} did not complete. Remaining steps skipped.[/bold red]"
            )
            return PipelineResult(
                outcome=PipelineOutcome.aborted,
                steps=results,
                project_path=project_path,
            )

        console.print(f"[yellow]Warning:[/yellow] continuing after {step.name} ({result.status.value})")

    outcome = (
        PipelineOutcome.complete_with_warnings
        if any(not r.ok for r in results)
        else PipelineOutcome.complete
    )
    return PipelineResult(outcome=outcome, steps=results, project_path=project_path)
