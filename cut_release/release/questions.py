"""Interactive question types and the prompt capability.

The answer flow only describes what it wants to ask; a :class:`Prompter`
decides how to render it. The terminal implementation lives in
``cut_release.cli.prompts``.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar, cast

T = TypeVar("T")

# Returns an error message, or None when the input is acceptable.
Validator = Callable[[str], str | None]


@dataclass(frozen=True, slots=True)
class Choice(Generic[T]):
    value: T
    label: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class SelectQuestion(Generic[T]):
    message: str
    choices: tuple[Choice[T], ...]
    default_index: int = 0


@dataclass(frozen=True, slots=True)
class TextQuestion:
    message: str
    validate: Validator | None = None
    default: str | None = None


@dataclass(frozen=True, slots=True)
class ConfirmQuestion:
    message: str
    default: bool = False


class Prompter(Protocol):
    def select(self, question: SelectQuestion[T]) -> T:
        """Return the value of the chosen option."""
        ...

    def text(self, question: TextQuestion) -> str:
        """Return free text that passed ``question.validate``."""
        ...

    def confirm(self, question: ConfirmQuestion) -> bool: ...


Question = SelectQuestion[object] | TextQuestion | ConfirmQuestion


class ScriptedPrompter:
    """Prompter answering from a fixed script, for tests.

    Text answers rejected by the question's validator are recorded in
    ``rejected`` and the next scripted answer is tried, like a re-prompt.
    An unexpected question raises AssertionError.
    """

    def __init__(self, answers: Iterable[object] = ()) -> None:
        self._answers: deque[object] = deque(answers)
        self.asked: list[Question] = []
        self.rejected: list[str] = []

    def _next(self, message: str) -> object:
        if not self._answers:
            raise AssertionError(f"unexpected question: {message}")
        return self._answers.popleft()

    def select(self, question: SelectQuestion[T]) -> T:
        self.asked.append(cast(SelectQuestion[object], question))
        answer = self._next(question.message)
        values = [c.value for c in question.choices]
        if answer not in values:
            raise AssertionError(f"{answer!r} is not one of {values!r}")
        return cast(T, answer)

    def text(self, question: TextQuestion) -> str:
        self.asked.append(question)
        while True:
            answer = str(self._next(question.message))
            if question.validate is None or question.validate(answer) is None:
                return answer
            self.rejected.append(answer)

    def confirm(self, question: ConfirmQuestion) -> bool:
        self.asked.append(question)
        return bool(self._next(question.message))

    @property
    def messages(self) -> list[str]:
        return [q.message for q in self.asked]
