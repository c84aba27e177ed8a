"""UI kit step: initialize shadcn/ui."""

from __future__ import annotations

from agency_ui.scaffold.package_manager import exec_command
from agency_ui.scaffold.questions import Question, QuestionKind, collect
from agency_ui.scaffold.steps.base import SetupStep, StepContext, StepSkipped, SubAction

SHADCN_QUESTIONS = [
    Question(
        key="install_shadcn",
        message="Install shadcn/ui?",
        kind=QuestionKind.confirm,
        default=True,
    ),
]


class ShadcnStep(SetupStep):
    name = "setup-shadcn"
    title = "Setup shadcn/ui"

    def plan(self, ctx: StepContext) -> list[SubAction]:
        answers = collect(SHADCN_QUESTIONS, ctx.prompter)
        if not answers["install_shadcn"]:
            raise StepSkipped("Skipping shadcn/ui installation")

        manager = ctx.package_manager
        return [
            SubAction(
                "shadcn/ui installed",
                lambda: ctx.run(exec_command(manager, "shadcn@latest init -y")),
            ),
        ]
