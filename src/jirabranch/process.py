"""Run external commands (jira, git) and capture their output."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Exit codes used when the process never produced one of its own.
NOT_FOUND_EXIT = 127
TIMEOUT_EXIT = 124


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr together, the way `cmd 2>&1` would read."""
        return self.stdout + self.stderr


AsyncRunner = Callable[..., Awaitable[CommandResult]]


def run_command(
    args: list[str],
    cwd: str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run a command synchronously. Never raises for a failed command."""
    logger.debug("run: %s (cwd=%s)", " ".join(args), cwd)
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except OSError as e:
        logger.debug("run: %s could not start: %s", args[0], e)
        return CommandResult(tuple(args), NOT_FOUND_EXIT, "", f"{args[0]}: {e.strerror or e}")
    except subprocess.TimeoutExpired:
        logger.debug("run: %s timed out after %ss", args[0], timeout)
        return CommandResult(tuple(args), TIMEOUT_EXIT, "", f"{args[0]}: timed out")

    logger.debug("run: %s exited %d", args[0], result.returncode)
    return CommandResult(tuple(args), result.returncode, result.stdout, result.stderr)


async def run_command_async(
    args: list[str],
    cwd: str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run a command without blocking the event loop.

    Same contract as `run_command`: a missing executable, a timeout or a
    non-zero exit all come back as a `CommandResult`.
    """
    logger.debug("run async: %s (cwd=%s)", " ".join(args), cwd)
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.debug("run async: %s could not start: %s", args[0], e)
        return CommandResult(tuple(args), NOT_FOUND_EXIT, "", f"{args[0]}: {e.strerror or e}")

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.debug("run async: %s timed out after %ss", args[0], timeout)
        return CommandResult(tuple(args), TIMEOUT_EXIT, "", f"{args[0]}: timed out")

    returncode = proc.returncode if proc.returncode is not None else 0
    logger.debug("run async: %s exited %d", args[0], returncode)
    return CommandResult(
        tuple(args),
        returncode,
        stdout.decode(errors="replace"),
        stderr.decode(errors="replace"),
    )
