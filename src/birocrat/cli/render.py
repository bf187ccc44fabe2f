"""CLI renderer for Birocrat."""

from __future__ import annotations

from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from birocrat.form.types import Question

EDITOR_COMMENT_PREFIX = "#"


class Renderer:
    """CLI renderer using Rich for terminal output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()

    def info(self, message: str) -> None:
        """Render an info message."""
        self.console.print(message)

    def error(self, message: str) -> None:
        """Render an error message."""
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)

    def question(self, number: int, question: Question) -> None:
        """Render a question header, with its options for select questions."""
        self.console.print(f"[bold cyan]{number}.[/bold cyan] {escape(question.prompt)}")
        if question.is_select:
            for index, option in enumerate(question.options, start=1):
                self.console.print(f"   [magenta]{index})[/magenta] {escape(option)}")
            hint = "one or more numbers, comma separated" if question.multiple else "a number"
            self.console.print(f"[dim]Choose {hint}.[/dim]")

    def ask(self, default: str | None = None) -> str:
        """Read one line of input."""
        if default is None:
            return Prompt.ask(">", console=self.console)
        return Prompt.ask(">", console=self.console, default=default)

    def read_multiline(self, prompt: str, starter: str = "") -> str:
        """Collect multiline text through the user's editor.

        The prompt is shown as a commented header, which is stripped from the
        edited text along with surrounding whitespace.
        """
        header = prompt.replace("\n", f"\n{EDITOR_COMMENT_PREFIX} ")
        edited = click.edit(f"{EDITOR_COMMENT_PREFIX}{header}\n\n{starter}", require_save=True)
        if edited is None:
            return ""
        lines = edited.splitlines()
        while lines and lines[0].startswith(EDITOR_COMMENT_PREFIX):
            lines.pop(0)
        return "\n".join(lines).strip()

    def result(self, result: Any, *, indent: int = 2) -> None:
        """Render the final form result as JSON."""
        self.console.print_json(data=result, indent=indent)
