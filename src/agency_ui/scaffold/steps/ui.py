"""Fonts and layout step: root layout with Google fonts, Tailwind theme."""

from __future__ import annotations

from pathlib import Path

from agency_ui.models.config import ScaffoldConfig
from agency_ui.scaffold.merge import ensure_dir, locate_app_directory, patch_text, read_text, write_text
from agency_ui.scaffold.questions import Answers, Choice, Question, QuestionKind, collect
from agency_ui.scaffold.renderer import (
    AVAILABLE_FONTS,
    FontSelection,
    render_globals_css,
    render_layout,
)
from agency_ui.scaffold.steps.auth import PROVIDERS_PATCH
from agency_ui.scaffold.steps.base import SetupStep, StepContext, SubAction

FONT_CHOICES: list[Choice] = [Choice(f.name, f.variable) for f in AVAILABLE_FONTS]


def selected_font_choices(answers: Answers) -> list[Choice]:
    picked = answers.get("fonts") or []
    return [c for c in FONT_CHOICES if c.value in picked]


def default_primary_font(answers: Answers) -> str | None:
    choices = selected_font_choices(answers)
    return choices[0].value if choices else None


def ui_questions(config: ScaffoldConfig) -> list[Question]:
    return [
        Question(
            key="fonts",
            message="Select fonts to install",
            kind=QuestionKind.multiselect,
            choices=FONT_CHOICES,
            default=list(config.default_fonts),
            required=True,
            cancel_message="At least one font is required. Initialization cancelled.",
        ),
        Question(
            key="primary_font",
            message="Select primary font (used for font-sans)",
            kind=QuestionKind.select,
            choices=selected_font_choices,
            default=default_primary_font,
        ),
        Question(
            key="create_layout",
            message="Create/overwrite app/layout.tsx?",
            kind=QuestionKind.confirm,
            default=True,
        ),
        Question(
            key="create_globals",
            message="Create/overwrite app/globals.css?",
            kind=QuestionKind.confirm,
            default=True,
        ),
    ]


def write_layout(app_dir: Path, selection: FontSelection) -> None:
    """Write the font layout, keeping an existing <Providers> wrapper."""
    layout_path = app_dir / "layout.tsx"
    content = render_layout(selection)
    if layout_path.exists() and PROVIDERS_PATCH.marker in read_text(layout_path):
        content = patch_text(content, PROVIDERS_PATCH).content
    write_text(layout_path, content)


class UIStep(SetupStep):
    """Configure fonts in the root layout and the global stylesheet."""

    name = "setup-ui"
    title = "Setup UI Components"

    def plan(self, ctx: StepContext) -> list[SubAction]:
        answers = collect(ui_questions(ctx.config), ctx.prompter)
        selection = FontSelection(fonts=answers["fonts"], primary=answers.get("primary_font"))
        app_dir = locate_app_directory(ctx.target().path)

        actions = [SubAction(f"App directory ready ({app_dir.name}/)", lambda: ensure_dir(app_dir))]
        if answers["create_layout"]:
            actions.append(
                SubAction("layout.tsx written", lambda: write_layout(app_dir, selection))
            )
        if answers["create_globals"]:
            actions.append(
                SubAction(
                    "globals.css written",
                    lambda: write_text(app_dir / "globals.css", render_globals_css(selection)),
                )
            )
        return actions
