"""Setup steps, in the order the full pipeline runs them."""

from agency_ui.scaffold.steps.auth import AuthStep
from agency_ui.scaffold.steps.base import SetupStep, StepContext, StepSkipped, SubAction
from agency_ui.scaffold.steps.create_project import CreateProjectStep
from agency_ui.scaffold.steps.prisma import PrismaStep
from agency_ui.scaffold.steps.shadcn import ShadcnStep
from agency_ui.scaffold.steps.ui import UIStep

PIPELINE: list[type[SetupStep]] = [
    CreateProjectStep,
    AuthStep,
    ShadcnStep,
    PrismaStep,
    UIStep,
]

__all__ = [
    "PIPELINE",
    "AuthStep",
    "CreateProjectStep",
    "PrismaStep",
    "SetupStep",
    "ShadcnStep",
    "StepContext",
    "StepSkipped",
    "SubAction",
    "UIStep",
]
