from __future__ import annotations

from typing import TypeVar

import typer

from cut_release.output.console import ConsoleProtocol, Style
from cut_release.release.questions import ConfirmQuestion, SelectQuestion, TextQuestion

T = TypeVar("T")


class TerminalPrompter:
    """Prompter rendering questions as numbered lists and line prompts."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def select(self, question: SelectQuestion[T]) -> T:
        if not question.choices:
            raise ValueError("select question requires at least one choice")

        self._console.header(question.message)
        for i, choice in enumerate(question.choices, start=1):
            line = f"{i:2}. {choice.label}"
            if choice.detail:
                line += f"  ({choice.detail})"
            self._console.print(line)

        default_idx = max(0, min(question.default_index, len(question.choices) - 1)) + 1
        while True:
            raw = typer.prompt("Pick a number", default=str(default_idx))
            try:
                idx = int(raw)
            except ValueError:
                self._console.error("invalid number")
                continue
            if idx < 1 or idx > len(question.choices):
                self._console.error("out of range")
                continue
            chosen = question.choices[idx - 1]
            self._console.print(f"> {chosen.label}", Style.DIM)
            return chosen.value

    def text(self, question: TextQuestion) -> str:
        while True:
            if question.default is None:
                raw = typer.prompt(question.message)
            else:
                raw = typer.prompt(question.message, default=question.default, show_default=False)
            answer = str(raw)
            if question.validate is None:
                return answer
            problem = question.validate(answer)
            if problem is None:
                return answer
            self._console.error(problem)

    def confirm(self, question: ConfirmQuestion) -> bool:
        return typer.confirm(question.message, default=question.default)
