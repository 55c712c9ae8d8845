"""
Interactive yes/no confirmation.

The prompt reads one answer from an answer source and classifies it as
confirmed, declined or invalid. The CLI reads answers through a rich
prompt; tests pass a scripted source instead.
"""

from typing import Callable, Iterable, List, Optional

from rich.console import Console
from rich.prompt import Prompt

from php_switcher.core.models import Confirmation

console = Console()

AnswerSource = Callable[[str], str]


def parse_confirmation(answer: Optional[str]) -> Confirmation:
    """
    Classify an answer.

    Empty input and anything starting with n/N decline; anything
    starting with y/Y confirms; everything else is invalid.
    """
    answer = (answer or "").strip()
    if not answer or answer[0] in "nN":
        return Confirmation.DECLINED
    if answer[0] in "yY":
        return Confirmation.CONFIRMED
    return Confirmation.INVALID


def console_answer_source(message: str) -> str:
    return Prompt.ask(
        f"[yellow]{message} (y/n)[/yellow]",
        console=console,
        default="",
        show_default=False,
    )


class ScriptedAnswers:
    """Answer source replaying a fixed list of answers."""

    def __init__(self, answers: Iterable[str]):
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, message: str) -> str:
        self.prompts.append(message)
        return self.answers.pop(0) if self.answers else ""


class ConfirmationPrompt:
    """Synchronous yes/no prompt returning a tri-state answer."""

    def __init__(self, source: Optional[AnswerSource] = None):
        self.source = source or console_answer_source

    def ask(self, message: str) -> Confirmation:
        return parse_confirmation(self.source(message))
