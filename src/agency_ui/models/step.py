"""Step and pipeline result models.

These models encode the orchestration contract: how each setup step
ended, and what that means for the pipeline run as a whole.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class FatalityPolicy(str, Enum):
    """What a step failure means for the rest of the pipeline."""

    abort = "abort"
    continue_ = "continue"


class StepStatus(str, Enum):
    """Outcome of a single setup step."""

    completed = "completed"
    skipped = "skipped"
    cancelled = "cancelled"
    failed = "failed"


class StepResult(BaseModel):
    """Result of executing one setup step.

    ``project_path`` is set by steps that decide where the project lives;
    later steps in the same run operate on that path.
    """

    model_config = {"extra": "forbid"}

    name: str
    status: StepStatus
    detail: str = ""
    actions_completed: int = 0
    project_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.status in (StepStatus.completed, StepStatus.skipped)


class PipelineOutcome(str, Enum):
    """Overall outcome of a pipeline run."""

    complete = "complete"
    complete_with_warnings = "complete_with_warnings"
    aborted = "aborted"


class PipelineResult(BaseModel):
    """Aggregate result of running an ordered list of setup steps."""

    model_config = {"extra": "forbid"}

    outcome: PipelineOutcome
    steps: list[StepResult] = Field(default_factory=list)
    project_path: Path | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.outcome == PipelineOutcome.aborted else 0

    @property
    def warnings(self) -> list[StepResult]:
        return [s for s in self.steps if not s.ok]
