"""Create a git branch from a Jira ticket, one confirmed step at a time."""

from __future__ import annotations

import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from jirabranch.config import Config
from jirabranch.git import GitCommandError, GitRepository
from jirabranch.host import Severity, WorkflowHost
from jirabranch.jira import TicketResolver

logger = logging.getLogger(__name__)

TICKET_PROMPT = "Enter Jira Ticket ID: "
BRANCH_PROMPT = "Proposed branch name: "
BASE_BRANCH_TITLE = "Select base branch:"


class WorkflowState(enum.Enum):
    AWAIT_TICKET = "await_ticket"
    RESOLVE_TITLE = "resolve_title"
    AWAIT_BRANCH_NAME = "await_branch_name"
    AWAIT_BASE_BRANCH = "await_base_branch"
    VALIDATE_BASE = "validate_base"
    VALIDATE_EXISTING = "validate_existing"
    EXECUTE = "execute"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (WorkflowState.DONE, WorkflowState.CANCELLED, WorkflowState.FAILED)


@dataclass
class BranchPlan:
    ticket: str = ""
    title: str = ""
    branch_name: str = ""
    base_branch: str = ""
    branch_exists: bool = False


@dataclass
class WorkflowResult:
    state: WorkflowState
    plan: BranchPlan
    message: str | None = None
    severity: Severity = "information"


class BranchWorkflow:
    """Drives one "create branch from ticket" run.

    Each step is a handler that returns the next state, so going back to the
    branch-name prompt after a bad base branch is a plain state change, not a
    nested call.
    """

    def __init__(
        self,
        config: Config,
        host: WorkflowHost,
        git: GitRepository,
        resolver: TicketResolver | None = None,
    ) -> None:
        self.config = config
        self.host = host
        self.git = git
        self.resolver = resolver or TicketResolver(config.jira, self.notify)
        self.plan = BranchPlan()
        self.state = WorkflowState.AWAIT_TICKET
        self._last_message: str | None = None
        self._last_severity: Severity = "information"
        self._handlers: dict[WorkflowState, Callable[[], Awaitable[WorkflowState]]] = {
            WorkflowState.AWAIT_TICKET: self._await_ticket,
            WorkflowState.RESOLVE_TITLE: self._resolve_title,
            WorkflowState.AWAIT_BRANCH_NAME: self._await_branch_name,
            WorkflowState.AWAIT_BASE_BRANCH: self._await_base_branch,
            WorkflowState.VALIDATE_BASE: self._validate_base,
            WorkflowState.VALIDATE_EXISTING: self._validate_existing,
            WorkflowState.EXECUTE: self._execute,
        }

    def notify(
        self,
        message: str,
        severity: Severity = "information",
        timeout: float | None = None,
    ) -> None:
        self._last_message = message
        self._last_severity = severity
        self.host.notify(
            message,
            severity=severity,
            timeout=timeout if timeout is not None else self.config.notify_timeout,
        )

    async def run(self) -> WorkflowResult:
        while not self.state.terminal:
            handler = self._handlers[self.state]
            next_state = await handler()
            logger.info("%s -> %s", self.state.value, next_state.value)
            self.state = next_state
        return WorkflowResult(
            state=self.state,
            plan=self.plan,
            message=self._last_message,
            severity=self._last_severity,
        )

    # -- Steps --

    async def _await_ticket(self) -> WorkflowState:
        ticket = await self.host.prompt(TICKET_PROMPT)
        if not ticket:
            self.notify("No Jira ticket provided", severity="warning")
            return WorkflowState.CANCELLED
        self.plan.ticket = ticket
        if not self.config.jira.enabled or not await self.resolver.is_available():
            self.plan.title = ticket
            return WorkflowState.AWAIT_BRANCH_NAME
        return WorkflowState.RESOLVE_TITLE

    async def _resolve_title(self) -> WorkflowState:
        self.host.show_status(f"Fetching title for {self.plan.ticket}...")
        try:
            self.plan.title = await self.resolver.resolve(self.plan.ticket)
        finally:
            self.host.show_status(None)
        return WorkflowState.AWAIT_BRANCH_NAME

    async def _await_branch_name(self) -> WorkflowState:
        # Re-entry after a bad base branch keeps what the user already typed.
        default = self.plan.branch_name or self.plan.title
        branch_name = await self.host.prompt(BRANCH_PROMPT, default)
        if not branch_name:
            self.notify("Branch creation canceled")
            return WorkflowState.CANCELLED
        self.plan.branch_name = branch_name
        return WorkflowState.AWAIT_BASE_BRANCH

    async def _await_base_branch(self) -> WorkflowState:
        branches = self.config.branches
        choice = await self.host.select(BASE_BRANCH_TITLE, branches)
        if choice is None or not 0 <= choice < len(branches) or not branches[choice]:
            self.notify("Invalid choice. Please select a valid branch.", severity="error")
            return WorkflowState.AWAIT_BRANCH_NAME
        self.plan.base_branch = branches[choice]
        return WorkflowState.VALIDATE_BASE

    async def _validate_base(self) -> WorkflowState:
        base = self.plan.base_branch
        if not await self.git.branch_exists(base):
            self.notify(
                f"Base branch '{base}' does not exist locally or on {self.git.remote}.",
                severity="error",
            )
            return WorkflowState.AWAIT_BRANCH_NAME
        return WorkflowState.VALIDATE_EXISTING

    async def _validate_existing(self) -> WorkflowState:
        self.plan.branch_exists = await self.git.branch_exists(self.plan.branch_name)
        return WorkflowState.EXECUTE

    async def _execute(self) -> WorkflowState:
        name = self.plan.branch_name
        try:
            if self.plan.branch_exists:
                await self.git.checkout(name)
                self.notify("Branch already exists. Switching to the existing branch.")
                return WorkflowState.DONE

            await self.git.checkout(self.plan.base_branch)
            await self.git.create_branch(name)
        except GitCommandError as e:
            logger.error("%s", e)
            self.notify(str(e), severity="error")
            return WorkflowState.FAILED

        try:
            await self.git.push_upstream(name)
        except GitCommandError as e:
            logger.warning("%s", e)
            detail = f": {e.stderr}" if e.stderr else ""
            self.notify(
                f"Branch {name} created locally, but push to {self.git.remote} failed{detail}",
                severity="warning",
            )
            return WorkflowState.DONE

        self.notify(f"Branch created and pushed: {name}")
        return WorkflowState.DONE


async def create_branch_from_ticket(
    config: Config,
    host: WorkflowHost,
    repo_path: str | None,
) -> WorkflowResult:
    """Entry point: refuse to start outside a repository, else run the workflow."""
    if repo_path is None:
        message = "Not inside a git repository."
        host.notify(message, severity="error", timeout=config.notify_timeout)
        return WorkflowResult(
            state=WorkflowState.FAILED,
            plan=BranchPlan(),
            message=message,
            severity="error",
        )

    git = GitRepository(repo_path, remote=config.remote)
    return await BranchWorkflow(config, host, git).run()
