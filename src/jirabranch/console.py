"""Inline terminal host: plain prompts instead of modal dialogs."""

from __future__ import annotations

from collections.abc import Sequence

import click

from jirabranch.host import Severity
from jirabranch.prompt import PromptState

SEVERITY_COLORS: dict[str, str] = {
    "information": "green",
    "warning": "yellow",
    "error": "red",
}


class ConsoleHost:
    """Asks on stdin, reports with colored lines on stdout/stderr."""

    async def prompt(self, label: str, default: str = "") -> str | None:
        result: list[str | None] = []
        state = PromptState(label, default, on_close=result.append)
        try:
            text = click.prompt(
                label.rstrip().rstrip(":"),
                default=default or "",
                show_default=bool(default),
            )
        except click.Abort:
            # Ctrl-C / EOF
            click.echo()
            state.cancel()
        else:
            state.edit(text)
            state.confirm()
        return result[0]

    async def select(self, title: str, options: Sequence[str]) -> int | None:
        click.echo(title)
        for i, option in enumerate(options, start=1):
            click.echo(f"{i}. {option}")
        try:
            number = click.prompt("Type number", default=0, show_default=False, type=int)
        except click.Abort:
            click.echo()
            return None
        if 1 <= number <= len(options):
            return number - 1
        return None

    def notify(
        self,
        message: str,
        severity: Severity = "information",
        timeout: float | None = None,
    ) -> None:
        click.secho(
            message,
            fg=SEVERITY_COLORS.get(severity),
            err=severity == "error",
        )

    def show_status(self, message: str | None) -> None:
        if message:
            click.secho(message, dim=True)
