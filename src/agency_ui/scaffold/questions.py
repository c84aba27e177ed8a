"""Declarative, conditionally-branching prompt sequences.

A step describes what it needs to know as an ordered list of Question
descriptors. Each descriptor carries pure functions of the answers given
so far: one decides the prompt kind (or that the question is skipped),
others compute choices and the default. ``collect`` walks the list,
threading the growing answer mapping forward, and asks a Prompter only
for the questions whose gate is open.

Prompters are interchangeable: RichPrompter talks to the terminal,
DefaultsPrompter accepts every default (``--yes``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rich.console import Console
from rich.prompt import Confirm, Prompt

console = Console()

Answers = dict[str, Any]


class QuestionKind(str, Enum):
    """How a question is asked and what type its answer has."""

    text = "text"
    password = "password"
    select = "select"
    multiselect = "multiselect"
    confirm = "confirm"


@dataclass(frozen=True)
class Choice:
    """One option of a select or multiselect question."""

    title: str
    value: str


class UserCancellation(Exception):
    """Raised when a required question receives an empty or declined answer.

    Attributes:
        key: The question key whose answer cancelled the step.
    """

    def __init__(self, key: str, message: str = "") -> None:
        self.key = key
        super().__init__(message or f"Cancelled at '{key}'")


@dataclass(frozen=True)
class Question:
    """A prompt whose kind, choices, and default may depend on prior answers.

    Attributes:
        key: Name the answer is stored under.
        message: Prompt text.
        kind: A QuestionKind, or a gate ``(answers) -> QuestionKind | None``;
            None skips the question and no key is recorded.
        choices: Choice list, or a function of prior answers.
        default: Default value, or a function of prior answers.
        validate: Optional ``(value) -> error message | None``.
        required: If True, a falsy answer raises UserCancellation.
        cancel_message: Message carried by that cancellation.
    """

    key: str
    message: str
    kind: QuestionKind | Callable[[Answers], QuestionKind | None]
    choices: list[Choice] | Callable[[Answers], list[Choice]] = field(default_factory=list)
    default: Any = None
    validate: Callable[[Any], str | None] | None = None
    required: bool = False
    cancel_message: str = ""

    def resolve_kind(self, answers: Answers) -> QuestionKind | None:
        if callable(self.kind):
            return self.kind(answers)
        return self.kind

    def resolve_choices(self, answers: Answers) -> list[Choice]:
        if callable(self.choices):
            return self.choices(answers)
        return list(self.choices)

    def resolve_default(self, answers: Answers) -> Any:
        if callable(self.default):
            return self.default(answers)
        return self.default


@dataclass(frozen=True)
class ResolvedQuestion:
    """A question with its kind, choices, and default evaluated."""

    key: str
    message: str
    kind: QuestionKind
    choices: list[Choice]
    default: Any
    validate: Callable[[Any], str | None] | None = None

    def check(self, answer: Any) -> str | None:
        """Return a validation error for answer, or None if it is acceptable."""
        if self.validate is None or _is_empty(answer):
            return None
        return self.validate(answer)


def when(predicate: Callable[[Answers], bool], kind: QuestionKind) -> Callable[[Answers], QuestionKind | None]:
    """Build a gate asking a question of ``kind`` only if predicate holds."""
    return lambda answers: kind if predicate(answers) else None


class Prompter(ABC):
    """Source of answers for resolved questions.

    Interactive prompters are shown validation errors and asked again;
    for non-interactive ones an invalid answer cancels the step.
    """

    interactive: bool = False

    @abstractmethod
    def ask(self, question: ResolvedQuestion) -> Any:
        """Return the answer to question."""

    def show_error(self, message: str) -> None:
        """Report an invalid answer before the question is asked again."""


class DefaultsPrompter(Prompter):
    """Answers every question with its default, without interaction."""

    def ask(self, question: ResolvedQuestion) -> Any:
        if question.kind == QuestionKind.select and question.default is None and question.choices:
            return question.choices[0].value
        if question.kind == QuestionKind.multiselect:
            return _known_values(question)
        if question.kind == QuestionKind.confirm:
            return bool(question.default)
        return question.default


class RichPrompter(Prompter):
    """Asks questions on the terminal with rich.prompt."""

    interactive = True

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")

    def ask(self, question: ResolvedQuestion) -> Any:
        if question.kind == QuestionKind.confirm:
            return Confirm.ask(
                question.message, default=bool(question.default), console=self.console
            )

        if question.kind == QuestionKind.select:
            values = [c.value for c in question.choices]
            default = question.default if question.default in values else values[0]
            return Prompt.ask(
                question.message, choices=values, default=default, console=self.console
            )

        if question.kind == QuestionKind.multiselect:
            return self._ask_multiselect(question)

        return Prompt.ask(
            question.message,
            default=question.default or "",
            password=question.kind == QuestionKind.password,
            console=self.console,
        )

    def _ask_multiselect(self, question: ResolvedQuestion) -> list[str]:
        values = [c.value for c in question.choices]
        default = ",".join(_known_values(question))
        hint = ", ".join(values)
        while True:
            raw = Prompt.ask(
                f"{question.message} [dim](comma-separated: {hint})[/dim]",
                default=default,
                console=self.console,
            )
            picked = [v.strip() for v in raw.split(",") if v.strip()]
            unknown = [v for v in picked if v not in values]
            if not unknown:
                return [v for v in values if v in picked]
            self.console.print(f"[red]Unknown choice(s): {', '.join(unknown)}[/red]")


def _known_values(question: ResolvedQuestion) -> list[str]:
    """Multiselect default restricted to values that are among the choices."""
    values = {c.value for c in question.choices}
    return [v for v in question.default or [] if v in values]


def _is_empty(value: Any) -> bool:
    return value is None or value is False or value == "" or value == []


def collect(questions: list[Question], prompter: Prompter) -> Answers:
    """Ask questions in order and return the answers mapping.

    Questions whose gate resolves to None are skipped and contribute no key.

    Raises:
        UserCancellation: If a required question gets an empty answer.
    """
    answers: Answers = {}
    for question in questions:
        kind = question.resolve_kind(answers)
        if kind is None:
            continue
        resolved = ResolvedQuestion(
            key=question.key,
            message=question.message,
            kind=kind,
            choices=question.resolve_choices(answers),
            default=question.resolve_default(answers),
            validate=question.validate,
        )
        while True:
            answer = prompter.ask(resolved)
            error = resolved.check(answer)
            if error is None:
                break
            if not prompter.interactive:
                raise UserCancellation(question.key, error)
            prompter.show_error(error)
        if question.required and _is_empty(answer):
            raise UserCancellation(question.key, question.cancel_message)
        answers[question.key] = answer
    return answers
