"""SetupStep ABC and the context steps run in.

A step collects its answers, turns them into an ordered list of
sub-actions, and runs those strictly in order. ``execute`` is where the
typed errors of the layers below become a StepResult; nothing here
decides whether the pipeline goes on. That is the orchestrator's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from rich.console import Console

from agency_ui.models.config import ScaffoldConfig
from agency_ui.models.step import FatalityPolicy, StepResult, StepStatus
from agency_ui.models.target import PackageManager, ProjectTarget
from agency_ui.scaffold.merge import FileSystemError
from agency_ui.scaffold.questions import Answers, Prompter, UserCancellation
from agency_ui.scaffold.runner import CommandExecutionError, CommandRunner

console = Console()


@dataclass
class StepContext:
    """Everything a step needs besides its own answers.

    ``project_path`` is the directory the step operates on. Before the
    base project exists it is the parent directory the project will be
    created in.
    """

    project_path: Path
    prompter: Prompter
    runner: CommandRunner
    config: ScaffoldConfig = field(default_factory=ScaffoldConfig)
    _target: ProjectTarget | None = field(default=None, repr=False)

    def target(self) -> ProjectTarget:
        """The ProjectTarget for project_path, detected once per path."""
        if self._target is None or self._target.path != self.project_path.resolve():
            self._target = ProjectTarget.detect(self.project_path)
        return self._target

    def bind(self, target: ProjectTarget) -> None:
        """Move the context onto target, fixing its package manager."""
        self.project_path = target.path
        self._target = target

    @property
    def package_manager(self) -> PackageManager:
        return self.target().package_manager

    def run(self, command: str) -> None:
        """Run command in the project directory."""
        self.runner.run(command, self.target().path)


@dataclass
class SubAction:
    """One unit of work within a step: a command, a render+write, or a merge."""

    description: str
    perform: Callable[[], None]


class StepSkipped(Exception):
    """Raised by a step whose answers make it a no-op (e.g. auth = none)."""


class SetupStep(ABC):
    """A stage of the scaffolding pipeline.

    Subclasses set ``name``, ``title`` and ``policy`` and implement
    ``plan``. The policy is part of the step's definition and cannot be
    changed per run.
    """

    name: ClassVar[str]
    title: ClassVar[str]
    policy: ClassVar[FatalityPolicy] = FatalityPolicy.continue_

    @abstractmethod
    def plan(self, ctx: StepContext) -> list[SubAction]:
        """Collect answers and return the sub-actions to run, in order.

        Raises:
            UserCancellation: If the user declined a required prompt.
            StepSkipped: If the answers make the step a no-op.
        """

    def result_path(self, ctx: StepContext) -> Path | None:
        """Project path this step hands to later steps, if it decides one."""
        return None

    def execute(self, ctx: StepContext) -> StepResult:
        """Plan and run the step, converting failures into a StepResult."""
        console.print(f"\n[bold blue]{self.title}[/bold blue]")

        try:
            actions = self.plan(ctx)
        except UserCancellation as exc:
            console.print(f"[red]✗ {exc}[/red]")
            return StepResult(name=self.name, status=StepStatus.cancelled, detail=str(exc))
        except StepSkipped as exc:
            console.print(f"[dim]{exc}[/dim]")
            return StepResult(name=self.name, status=StepStatus.skipped, detail=str(exc))
        except FileSystemError as exc:
            console.print(f"[red]✗ {exc}[/red]")
            return StepResult(name=self.name, status=StepStatus.failed, detail=str(exc))

        done = 0
        for action in actions:
            try:
                action.perform()
            except CommandExecutionError as exc:
                console.print(f"[red]✗ {action.description} failed[/red]")
                console.print(f"  [red]command:[/red] {exc.command}")
                console.print(f"  [red]directory:[/red] {exc.cwd}")
                return self._failed(ctx, str(exc), done)
            except FileSystemError as exc:
                console.print(f"[red]✗ {action.description} failed: {exc}[/red]")
                return self._failed(ctx, str(exc), done)
            done += 1
            console.print(f"[green]✓[/green] {action.description}")

        return StepResult(
            name=self.name,
            status=StepStatus.completed,
            actions_completed=done,
            project_path=self.result_path(ctx),
        )

    def _failed(self, ctx: StepContext, detail: str, done: int) -> StepResult:
        return StepResult(
            name=self.name,
            status=StepStatus.failed,
            detail=detail,
            actions_completed=done,
            project_path=self.result_path(ctx),
        )
