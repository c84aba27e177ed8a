"""Agency UI data models - re-exports all public model classes."""

from agency_ui.models.config import ScaffoldConfig
from agency_ui.models.step import (
    FatalityPolicy,
    PipelineOutcome,
    PipelineResult,
    StepResult,
    StepStatus,
)
from agency_ui.models.target import PackageManager, ProjectTarget

__all__ = [
    "FatalityPolicy",
    "PackageManager",
    "PipelineOutcome",
    "PipelineResult",
    "ProjectTarget",
    "ScaffoldConfig",
    "StepResult",
    "StepStatus",
]
