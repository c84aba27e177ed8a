"""Shared fixtures: a recording command runner and a scripted prompter."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from agency_ui.models.config import ScaffoldConfig
from agency_ui.scaffold.questions import DefaultsPrompter, Prompter, ResolvedQuestion
from agency_ui.scaffold.runner import CommandExecutionError, CommandRunner
from agency_ui.scaffold.steps.base import StepContext


class FakeRunner(CommandRunner):
    """Records commands instead of running them.

    Any command containing one of ``fail_on`` raises CommandExecutionError
    with exit code 1, as a real failing process would.
    """

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        super().__init__(dry_run=False)
        self.fail_on = fail_on
        self.calls: list[tuple[str, Path]] = []

    def run(self, command: str, cwd: Path) -> None:
        self.calls.append((command, cwd))
        if any(fragment in command for fragment in self.fail_on):
            raise CommandExecutionError(command, cwd, 1)

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]


class ScriptedPrompter(Prompter):
    """Answers from a key -> value mapping, falling back to defaults."""

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})
        self.asked: list[str] = []
        self._defaults = DefaultsPrompter()

    def ask(self, question: ResolvedQuestion) -> Any:
        self.asked.append(question.key)
        if question.key in self.answers:
            return self.answers[question.key]
        return self._defaults.ask(question)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_context():
    """Factory for a StepContext rooted at a given path."""

    def _make(
        path: Path,
        answers: dict[str, Any] | None = None,
        runner: CommandRunner | None = None,
        config: ScaffoldConfig | None = None,
    ) -> StepContext:
        return StepContext(
            project_path=path,
            prompter=ScriptedPrompter(answers),
            runner=runner or FakeRunner(),
            config=config or ScaffoldConfig(),
        )

    return _make
