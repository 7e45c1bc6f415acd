from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from unittest.mock import patch

import pytest

from jirabranch.process import CommandResult


class FakeRunner:
    """Async command runner that records argv and answers via a handler."""

    def __init__(self, handler: Callable[[list[str]], CommandResult] | None = None) -> None:
        self.calls: list[list[str]] = []
        self._handler = handler or (lambda args: CommandResult(tuple(args), 0))

    async def __call__(
        self,
        args: list[str],
        cwd: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        self.calls.append(list(args))
        return self._handler(list(args))

    def git_calls(self) -> list[list[str]]:
        """Git invocations without the leading `git -C <repo>`."""
        return [call[3:] for call in self.calls if call[:2] == ["git", "-C"]]


def git_handler(
    existing: set[str],
    fail: dict[str, str] | None = None,
) -> Callable[[list[str]], CommandResult]:
    """Answer `rev-parse --verify` from `existing`; fail commands named in `fail`.

    `existing` holds short branch names ("development", "origin/master").
    `fail` maps a git argv prefix ("push", "checkout -b") to the stderr it
    fails with; the longest matching prefix wins.
    """
    fail = fail or {}

    def handler(args: list[str]) -> CommandResult:
        git_args = args[3:]
        if git_args[:2] == ["rev-parse", "--verify"]:
            ref = git_args[-1].removeprefix("refs/heads/").removeprefix("refs/remotes/")
            return CommandResult(tuple(args), 0 if ref in existing else 1)
        matches = [
            prefix for prefix in fail if git_args[: len(prefix.split())] == prefix.split()
        ]
        if matches:
            prefix = max(matches, key=lambda p: len(p.split()))
            return CommandResult(tuple(args), 1, "", fail[prefix])
        return CommandResult(tuple(args), 0)

    return handler


class RecordingHost:
    """WorkflowHost that replays scripted answers and records everything shown."""

    def __init__(
        self,
        answers: Sequence[str | None] = (),
        choices: Sequence[int | None] = (),
    ) -> None:
        self._answers = list(answers)
        self._choices = list(choices)
        self.prompts: list[tuple[str, str]] = []
        self.selects: list[tuple[str, list[str]]] = []
        self.notifications: list[tuple[str, str]] = []
        self.statuses: list[str | None] = []

    async def prompt(self, label: str, default: str = "") -> str | None:
        self.prompts.append((label, default))
        return self._answers.pop(0) if self._answers else None

    async def select(self, title: str, options: Sequence[str]) -> int | None:
        self.selects.append((title, list(options)))
        return self._choices.pop(0) if self._choices else None

    def notify(self, message: str, severity: str = "information", timeout: float | None = None) -> None:
        self.notifications.append((message, severity))

    def show_status(self, message: str | None) -> None:
        self.statuses.append(message)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path):
    """Keep tests away from the user's ~/.config/jira-branch."""
    config_dir = tmp_path / "config"
    with patch("jirabranch.config.CONFIG_DIR", config_dir), \
         patch("jirabranch.config.CONFIG_FILE", config_dir / "config.toml"):
        yield config_dir


@pytest.fixture
def git_repo(tmp_path):
    repo = tmp_path / "myrepo"
    repo.mkdir()
    subprocess.run(["git", "init", "-b", "development", str(repo)], check=True, capture_output=True)
    subprocess.run(
        [
            "git",
            "-C",
            str(repo),
            "-c",
            "user.name=Test",
            "-c",
            "user.email=test@example.com",
            "commit",
            "--allow-empty",
            "-m",
            "init",
        ],
        check=True,
        capture_output=True,
    )
    return repo
