from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, OptionList


class SelectDialog(ModalScreen[int | None]):
    """Pick one entry from an ordered list; dismisses with its index."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    DEFAULT_CSS = """
    SelectDialog {
        align: center middle;
    }

    SelectDialog #dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        border: round $accent;
        background: $surface;
    }

    SelectDialog .section-title {
        text-style: bold;
        margin: 0 0 1 0;
    }

    SelectDialog OptionList {
        height: auto;
        max-height: 12;
    }
    """

    def __init__(self, title: str, options: Sequence[str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._title = title
        self._options = list(options)
        self._dismissed = False

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(self._title, classes="section-title", markup=False)
            yield OptionList(
                *[f"{i}. {option}" for i, option in enumerate(self._options, start=1)],
                id="options",
            )

    def on_mount(self) -> None:
        options = self.query_one("#options", OptionList)
        if self._options:
            options.highlighted = 0
        options.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self._close(event.option_index)

    def action_cancel(self) -> None:
        self._close(None)

    def focus_lost(self) -> None:
        self._close(None)

    def _close(self, index: int | None) -> None:
        if self._dismissed:
            return
        self._dismissed = True
        self.dismiss(index)
