from __future__ import annotations

import getpass
from typing import Protocol

from ..errors import UsageError


class Prompter(Protocol):
    def ask(self, question: str) -> str:
        ...

    def ask_secret(self, question: str) -> str:
        ...


class ConsolePrompter:
    """Blocking terminal prompts; no timeout."""

    def ask(self, question: str) -> str:
        return input(question)

    def ask_secret(self, question: str) -> str:
        return getpass.getpass(question)


def ask_yes_no(prompter: Prompter, question: str) -> bool:
    """Accept exactly y/Y or n/N; anything else is a usage error."""

    answer = prompter.ask(question).strip()
    if answer in {"y", "Y"}:
        return True
    if answer in {"n", "N"}:
        return False
    raise UsageError(f"Please select the right option (y/n), got {answer!r}")
