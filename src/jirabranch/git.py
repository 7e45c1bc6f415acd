from __future__ import annotations

import logging
from pathlib import Path

from jirabranch.process import (
    AsyncRunner,
    CommandResult,
    run_command,
    run_command_async,
)

logger = logging.getLogger(__name__)


class GitCommandError(Exception):
    """Raised when a git command that changes repository state fails."""

    def __init__(self, args: list[str], stderr: str) -> None:
        self.git_args = args
        self.stderr = stderr.strip()
        msg = f"git {' '.join(args)} failed"
        if self.stderr:
            msg += f": {self.stderr}"
        super().__init__(msg)


def get_current_repo(cwd: str | None = None) -> str | None:
    """Return the top-level path of the repository containing cwd, if any."""
    result = run_command(["git", "rev-parse", "--show-toplevel"], cwd=cwd)
    if not result.ok:
        return None
    return str(Path(result.stdout.strip()))


class GitRepository:
    """The handful of git operations a branch workflow needs."""

    def __init__(
        self,
        repo_path: str,
        remote: str = "origin",
        runner: AsyncRunner = run_command_async,
    ) -> None:
        self.repo_path = repo_path
        self.remote = remote
        self.runner = runner

    async def _git(self, *args: str, check: bool = True) -> CommandResult:
        result = await self.runner(["git", "-C", self.repo_path, *args])
        if check and not result.ok:
            raise GitCommandError(list(args), result.stderr)
        return result

    async def ref_exists(self, ref: str) -> bool:
        result = await self._git("rev-parse", "--verify", "--quiet", ref, check=False)
        return result.ok

    async def branch_exists(self, name: str) -> bool:
        """True if `name` exists locally or as a remote-tracking branch.

        Only branch refs count: a tag or a commit id with the same name does not.
        """
        if await self.ref_exists(f"refs/heads/{name}"):
            return True
        return await self.ref_exists(f"refs/remotes/{self.remote}/{name}")

    async def checkout(self, ref: str) -> None:
        logger.info("checkout %s", ref)
        await self._git("checkout", ref)

    async def create_branch(self, name: str) -> None:
        """Create `name` from HEAD and switch to it."""
        logger.info("create branch %s", name)
        await self._git("checkout", "-b", name)

    async def push_upstream(self, name: str) -> None:
        logger.info("push %s to %s", name, self.remote)
        await self._git("push", "--set-upstream", self.remote, name)
