"""Confirmation prompts as an injectable capability.

Commands that destroy or overwrite something (``delete``, ``logout``,
writing fragments in ``get``) ask before acting. They do so through a
:class:`Confirmer` rather than calling Typer directly, so that ``--force``
and ``--no-input`` are just different confirmers and tests can script the
answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import typer


class Confirmer(ABC):
    """Answers yes/no questions on behalf of the user."""

    @abstractmethod
    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Return ``True`` if the action described by *prompt* may proceed."""
        ...


class TerminalConfirmer(Confirmer):
    """Ask on the terminal via :func:`typer.confirm`."""

    def confirm(self, prompt: str, default: bool = False) -> bool:
        return typer.confirm(prompt, default=default)


class StaticConfirmer(Confirmer):
    """Always give the same answer.

    ``StaticConfirmer(True)`` backs ``--force``; ``StaticConfirmer(False)``
    backs ``--no-input`` so that nothing destructive happens unattended.
    """

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def confirm(self, prompt: str, default: bool = False) -> bool:
        self.prompts.append(prompt)
        return self.answer


def make_confirmer(force: bool = False, no_input: bool = False) -> Confirmer:
    """Pick the confirmer matching the global ``--force`` / ``--no-input`` flags.

    ``--force`` wins over ``--no-input``: a forced, non-interactive run
    proceeds without asking.
    """
    if force:
        return StaticConfirmer(True)
    if no_input:
        return StaticConfirmer(False)
    return TerminalConfirmer()
