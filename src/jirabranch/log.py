"""Logging setup for jira-branch.

The terminal belongs to the TUI while a workflow runs, so log records go to
a file instead of stderr.

Environment Variables:
    JIRA_BRANCH_LOG: Set to "true" to enable logging (default: "false")
    JIRA_BRANCH_LOG_FILE: Path to log file (default: ~/.jira-branch.log)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOGGER_NAME = "jirabranch"


def _log_enabled() -> bool:
    return os.environ.get("JIRA_BRANCH_LOG", "false").lower() == "true"


def _log_file() -> Path:
    return Path(
        os.environ.get("JIRA_BRANCH_LOG_FILE", str(Path.home() / ".jira-branch.log"))
    )


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the package logger.

    Writes to the log file when JIRA_BRANCH_LOG is "true" or `verbose` is
    set; otherwise installs a NullHandler so nothing is emitted.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = False

    if verbose or _log_enabled():
        log_file = _log_file()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    else:
        logger.addHandler(logging.NullHandler())

    return logger
