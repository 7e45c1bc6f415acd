"""Resolve a Jira ticket id to a branch-name fragment via the `jira` CLI."""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Iterator
from dataclasses import dataclass

from jirabranch.config import ExtractionRule, JiraConfig
from jirabranch.host import Notifier
from jirabranch.process import AsyncRunner, run_command_async

logger = logging.getLogger(__name__)

NOT_LOGGED_IN_MARKERS = ("You are not logged in", "No configuration found", "401")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9 -]")
_HYPHEN_RUN = re.compile(r"-{2,}")


@dataclass(frozen=True)
class SearchPage:
    start: int
    size: int


def search_pages(page_size: int, max_start: int) -> Iterator[SearchPage]:
    """Yield pages from offset 0 while the offset does not exceed max_start."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    start = 0
    while start <= max_start:
        yield SearchPage(start=start, size=page_size)
        start += page_size


def normalize_fragment(key: str, summary: str) -> str:
    """Build a branch-safe fragment like ``ABC-42-fix-crash``.

    Returns an empty string when nothing alphanumeric survives.
    """
    text = f"{key.upper()}-{summary.lower()}"
    text = _UNSAFE_CHARS.sub("", text)
    text = text.replace(" ", "-")
    text = _HYPHEN_RUN.sub("-", text)
    return text.strip("-")


def extract_candidate(output: str, ticket: str, rule: ExtractionRule) -> str:
    """Find the ticket's row in a plain issue listing and normalize it."""
    wanted = ticket.strip().upper()
    for line in output.splitlines():
        fields = line.split("\t")
        if len(fields) <= max(rule.key_column, rule.summary_column):
            continue
        key = fields[rule.key_column].strip()
        if key.upper() != wanted:
            continue
        candidate = normalize_fragment(key, fields[rule.summary_column].strip())
        if candidate:
            return candidate
    return ""


class TicketResolver:
    """Looks up ticket titles, falling back to the raw ticket id.

    Resolution never raises: an unavailable CLI, a failing page or a ticket
    that never shows up all end with the query returned verbatim.
    """

    def __init__(
        self,
        config: JiraConfig,
        notify: Notifier,
        runner: AsyncRunner = run_command_async,
    ) -> None:
        self.config = config
        self.notify = notify
        self.runner = runner
        self._available: bool | None = None

    async def is_available(self) -> bool:
        """Check the CLI is installed and logged in.

        The probe (and its notification) runs once per resolver; later calls
        reuse the answer.
        """
        if self._available is None:
            self._available = await self._probe()
        return self._available

    async def _probe(self) -> bool:
        if shutil.which(self.config.command) is None:
            self.notify(
                "Jira CLI not found in PATH. Some features may not work.",
                severity="warning",
            )
            return False

        result = await self.runner([self.config.command, "me"], timeout=self.config.timeout)
        output = result.output
        if any(marker in output for marker in NOT_LOGGED_IN_MARKERS):
            logger.info("jira me reported no session: %s", output.strip())
            self.notify(
                "Jira CLI is not configured or you are not logged in.",
                severity="error",
            )
            return False
        return True

    def page_command(self, page: SearchPage) -> list[str]:
        return [
            self.config.command,
            "issue",
            "list",
            "--paginate",
            f"{page.start}:{page.size}",
            "--plain",
        ]

    async def search(self, ticket: str) -> str | None:
        """Walk the listing page by page. Returns None if nothing matched."""
        for page in search_pages(self.config.page_size, self.config.max_start):
            result = await self.runner(self.page_command(page), timeout=self.config.timeout)
            if not result.ok:
                logger.info(
                    "page %d:%d failed (exit %d): %s",
                    page.start,
                    page.size,
                    result.returncode,
                    result.stderr.strip(),
                )
                continue
            candidate = extract_candidate(result.stdout, ticket, self.config.extraction)
            if candidate:
                logger.info("resolved %s on page %d to %s", ticket, page.start, candidate)
                return candidate
        return None

    async def resolve(self, ticket: str) -> str:
        if not await self.is_available():
            return ticket

        title = await self.search(ticket)
        if title is None:
            self.notify(
                f"Jira ticket {ticket} not found. Using it as the branch name.",
                severity="warning",
            )
            return ticket
        return title
