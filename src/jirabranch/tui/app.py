from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from jirabranch.config import Config
from jirabranch.host import Severity
from jirabranch.tui.prompt import InputPrompt
from jirabranch.tui.select import SelectDialog
from jirabranch.workflow import WorkflowResult, create_branch_from_ticket

NOTIFY_TITLE = "Jira Branch"


class JiraBranchHost:
    """Routes workflow prompts and notifications into a running Textual app.

    Must be used from a worker: prompts wait for their screen to be
    dismissed.
    """

    def __init__(self, app: JiraBranchApp) -> None:
        self.app = app

    async def prompt(self, label: str, default: str = "") -> str | None:
        return await self.app.push_screen_wait(InputPrompt(label, default))

    async def select(self, title: str, options: Sequence[str]) -> int | None:
        return await self.app.push_screen_wait(SelectDialog(title, options))

    def notify(
        self,
        message: str,
        severity: Severity = "information",
        timeout: float | None = None,
    ) -> None:
        if timeout is None:
            self.app.notify(escape(message), title=NOTIFY_TITLE, severity=severity)
        else:
            self.app.notify(
                escape(message), title=NOTIFY_TITLE, severity=severity, timeout=timeout
            )

    def show_status(self, message: str | None) -> None:
        self.app.set_status(message)


class JiraBranchApp(App[WorkflowResult | None]):
    """Runs a single branch workflow and exits with its result."""

    TITLE = "jira-branch"

    CSS = """
    Screen {
        layout: vertical;
    }

    #status {
        height: 1fr;
        padding: 1 2;
        color: $text-muted;
    }
    """

    def __init__(self, config: Config, repo_path: str | None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.config = config
        self.repo_path = repo_path
        self.host = JiraBranchHost(self)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="status", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self._status = self.query_one("#status", Static)
        self.run_worker(self._run_workflow(), exclusive=True)

    async def _run_workflow(self) -> None:
        result = await create_branch_from_ticket(self.config, self.host, self.repo_path)
        self.exit(result)

    def set_status(self, message: str | None) -> None:
        self._status.update(message or "")

    def on_app_blur(self, event: events.AppBlur) -> None:
        """Leaving the terminal cancels whatever prompt is open."""
        if isinstance(self.screen, (InputPrompt, SelectDialog)):
            self.screen.focus_lost()

    async def action_quit(self) -> None:
        # Quit closes an open prompt first; the workflow then ends as cancelled.
        if isinstance(self.screen, InputPrompt):
            self.screen.action_cancel()
            return
        await super().action_quit()
