"""Terminal prompts built on click."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from collections.abc import Sequence


class ClickPrompter:
    """Blocking prompts on stdin/stdout."""

    def confirm(self, question: str, default: bool = False) -> bool:
        return click.confirm(question, default=default)

    def ask(self, question: str) -> str:
        return click.prompt(question, type=str)

    def choice(self, question: str, options: Sequence[str]) -> str:
        """Numbered menu; the user answers with the number or the exact label."""
        if not options:
            raise ValueError("choice() needs at least one option")
        click.echo(question)
        for index, option in enumerate(options):
            click.echo(f"  [{index}] {option}")
        while True:
            answer = click.prompt("Choice", default="0").strip()
            if answer.isdecimal() and int(answer) < len(options):
                return options[int(answer)]
            if answer in options:
                return answer
            click.echo(f'Value "{answer}" is invalid.', err=True)

    def text(self, message: str) -> None:
        click.echo(message)

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        widths = [len(h) for h in headers]
        for row in rows:
            widths = [max(w, len(cell)) for w, cell in zip(widths, row, strict=False)]
        rule = " ".join("-" * w for w in widths)

        def fmt(cells: Sequence[str]) -> str:
            return " ".join(f"{cell:{w}s}" for cell, w in zip(cells, widths, strict=False)).rstrip()

        click.echo(rule)
        click.echo(fmt(headers))
        click.echo(rule)
        for row in rows:
            click.echo(fmt(row))
        click.echo(rule)
