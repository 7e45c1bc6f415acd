"""Single-line prompt state, independent of how it is rendered."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PromptState:
    """Text being edited in one open prompt.

    Confirm, cancel and focus loss are terminal: whichever happens first
    closes the prompt and fires `on_close` once; every later trigger is
    ignored. `on_close` receives the entered text, or None for a cancel or
    an empty confirm. `release` runs before `on_close` so the callback can
    open the next prompt.
    """

    def __init__(
        self,
        label: str,
        default: str = "",
        on_close: Callable[[str | None], None] | None = None,
        release: Callable[[], None] | None = None,
    ) -> None:
        self.label = label
        self.default = default
        self.text = default
        self.closed = False
        self._on_close = on_close
        self._release = release

    @property
    def cursor(self) -> int:
        return len(self.text)

    def edit(self, text: str) -> None:
        if not self.closed:
            self.text = text

    def confirm(self) -> bool:
        return self._close(self.text or None)

    def cancel(self) -> bool:
        return self._close(None)

    def focus_lost(self) -> bool:
        return self._close(None)

    def _close(self, value: str | None) -> bool:
        if self.closed:
            return False
        self.closed = True
        logger.debug("prompt %r closed with %r", self.label, value)
        if self._release is not None:
            self._release()
        if self._on_close is not None:
            self._on_close(value)
        return True
