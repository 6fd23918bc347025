from __future__ import annotations

import sys

import typer
from prompt_toolkit import prompt as pt_prompt
from prompt_toolkit.key_binding import KeyBindings

from patchsync.interviewer.models import Answer, AnswerValue, Question


class ConsoleInterviewer:
    """Waits for Enter on the controlling terminal; prompt text goes to stderr."""

    def ask(self, question: Question) -> Answer:
        typer.echo(f"## {question.text} (Enter to continue, Ctrl+C to exit)", err=True)
        try:
            self._wait_for_enter()
        except (EOFError, KeyboardInterrupt):
            return Answer(value=AnswerValue.ABORTED)
        return Answer(value=AnswerValue.YES)

    def _wait_for_enter(self) -> None:
        if not sys.stdin.isatty():
            input()
            return

        bindings = KeyBindings()

        @bindings.add("enter")
        def _accept(event: object) -> None:
            event.app.exit(result="")  # type: ignore[attr-defined]

        pt_prompt("", key_bindings=bindings)
