from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label

from jirabranch.prompt import PromptState


class InputPrompt(ModalScreen[str | None]):
    """Centered single-line input, pre-filled with a default value.

    Enter confirms, escape cancels. Losing focus also cancels (see
    `JiraBranchApp.on_app_blur`). The screen is dismissed at most once.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    DEFAULT_CSS = """
    InputPrompt {
        align: center middle;
    }

    InputPrompt #dialog {
        width: 60;
        min-width: 40;
        max-width: 100%;
        height: auto;
        padding: 1 2;
        border: round $accent;
        border-title-align: center;
        background: $surface;
    }

    InputPrompt #dialog Label {
        color: $text-muted;
        margin: 0 0 1 0;
    }
    """

    def __init__(self, label: str, default: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.state = PromptState(label, default, on_close=self.dismiss)

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog") as dialog:
            dialog.border_title = self.state.label.strip()
            yield Input(value=self.state.default, select_on_focus=False, id="prompt-input")
            yield Label("enter: confirm  esc: cancel")

    def on_mount(self) -> None:
        inp = self.query_one("#prompt-input", Input)
        inp.focus()
        inp.cursor_position = self.state.cursor

    def on_input_changed(self, event: Input.Changed) -> None:
        self.state.edit(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.state.edit(event.value)
        self.state.confirm()

    def action_cancel(self) -> None:
        self.state.cancel()

    def focus_lost(self) -> None:
        self.state.focus_lost()
