"""The UI collaborator a branch workflow talks to."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal, Protocol

Severity = Literal["information", "warning", "error"]


class Notifier(Protocol):
    def __call__(
        self,
        message: str,
        severity: Severity = "information",
        timeout: float | None = None,
    ) -> None: ...


class WorkflowHost(Protocol):
    """Prompts, selection and notifications for one workflow run.

    `prompt` resolves to the entered text, or None when the prompt was
    cancelled. `select` resolves to a zero-based index into `options`, or
    None when nothing valid was chosen. All messages go through `notify`.
    """

    async def prompt(self, label: str, default: str = "") -> str | None: ...

    async def select(self, title: str, options: Sequence[str]) -> int | None: ...

    def notify(
        self,
        message: str,
        severity: Severity = "information",
        timeout: float | None = None,
    ) -> None: ...

    def show_status(self, message: str | None) -> None: ...
