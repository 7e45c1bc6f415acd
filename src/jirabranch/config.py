from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_DIR = Path.home() / ".config" / "jira-branch"
CONFIG_FILE = CONFIG_DIR / "config.toml"

REPO_CONFIG_NAME = ".jira-branch.toml"
REPO_LOCAL_CONFIG_NAME = ".jira-branch.local.toml"

DEFAULT_BRANCHES = ("development", "master", "pre-production")
PROMPT_STYLES = ("modal", "inline")

DEFAULT_CONFIG = """\
# Base branches offered when creating a branch, in display order.
branches = ["development", "master", "pre-production"]

[ui]
# "modal" opens centered dialogs, "inline" asks on the plain terminal.
style = "modal"
# Seconds a notification stays on screen.
notify_timeout = 2.0

[jira]
# Set to false to skip ticket lookups and use the ticket id as the title.
enabled = true
command = "jira"
page_size = 100
# Last page offset that is still searched.
max_start = 300
# Zero-based tab-separated columns of `jira issue list --plain`.
key_column = 1
summary_column = 2
# Seconds allowed per jira invocation.
timeout = 30

[git]
remote = "origin"
"""


class ConfigError(ValueError):
    """Raised when a config file holds an invalid value."""


@dataclass(frozen=True)
class ExtractionRule:
    """Which tab-separated columns of an issue listing hold key and summary."""

    key_column: int = 1
    summary_column: int = 2


@dataclass(frozen=True)
class JiraConfig:
    enabled: bool = True
    command: str = "jira"
    page_size: int = 100
    max_start: int = 300
    timeout: float = 30.0
    extraction: ExtractionRule = field(default_factory=ExtractionRule)


@dataclass(frozen=True)
class Config:
    branches: tuple[str, ...] = DEFAULT_BRANCHES
    prompt_style: str = "modal"  # modal | inline
    notify_timeout: float = 2.0
    remote: str = "origin"
    jira: JiraConfig = field(default_factory=JiraConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        ui = _section(data, "ui")
        jira = _section(data, "jira")
        git = _section(data, "git")

        branches = data.get("branches", list(DEFAULT_BRANCHES))
        if not isinstance(branches, list) or not branches:
            raise ConfigError("'branches' must be a non-empty list.")
        for branch in branches:
            if not isinstance(branch, str) or not branch.strip():
                raise ConfigError(f"Invalid base branch name: {branch!r}")

        prompt_style = ui.get("style", "modal")
        if prompt_style not in PROMPT_STYLES:
            raise ConfigError(
                f"ui.style must be one of {', '.join(PROMPT_STYLES)}, got {prompt_style!r}"
            )

        page_size = jira.get("page_size", 100)
        if not _is_int(page_size) or page_size <= 0:
            raise ConfigError("jira.page_size must be a positive integer.")
        max_start = jira.get("max_start", 300)
        if not _is_int(max_start) or max_start < 0:
            raise ConfigError("jira.max_start must be a non-negative integer.")

        key_column = jira.get("key_column", 1)
        summary_column = jira.get("summary_column", 2)
        for name, value in (("key_column", key_column), ("summary_column", summary_column)):
            if not _is_int(value) or value < 0:
                raise ConfigError(f"jira.{name} must be a non-negative integer.")

        enabled = jira.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ConfigError("jira.enabled must be true or false.")
        command = jira.get("command", "jira")
        if not isinstance(command, str) or not command.strip():
            raise ConfigError("jira.command must be a non-empty string.")

        remote = git.get("remote", "origin")
        if not isinstance(remote, str) or not remote.strip():
            raise ConfigError("git.remote must be a non-empty string.")

        return cls(
            branches=tuple(branches),
            prompt_style=prompt_style,
            notify_timeout=_seconds(ui, "ui.notify_timeout", 2.0),
            remote=remote,
            jira=JiraConfig(
                enabled=enabled,
                command=command,
                page_size=page_size,
                max_start=max_start,
                timeout=_seconds(jira, "jira.timeout", 30.0),
                extraction=ExtractionRule(
                    key_column=key_column,
                    summary_column=summary_column,
                ),
            ),
        )

    @classmethod
    def load(cls, repo_path: str | None = None) -> Config:
        return cls.from_dict(load_config_data(repo_path))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table.")
    return section


def _seconds(section: dict[str, Any], name: str, default: float) -> float:
    value = section.get(name.rsplit(".", 1)[-1], default)
    # bool is an int subclass; `timeout = true` is still a mistake
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"{name} must be a non-negative number of seconds.")
    return float(value)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e


def load_config_data(repo_path: str | None = None) -> dict[str, Any]:
    """Merge the global config with the repo's .jira-branch(.local).toml.

    Later files replace earlier ones at the section level (a repo [jira]
    table fully replaces the global [jira] table).
    """
    paths = [CONFIG_FILE]
    if repo_path:
        paths.append(Path(repo_path) / REPO_CONFIG_NAME)
        paths.append(Path(repo_path) / REPO_LOCAL_CONFIG_NAME)

    data: dict[str, Any] = {}
    for path in paths:
        if path.exists():
            for key, value in _read_toml(path).items():
                data[key] = value
    return data


def get_config(repo_path: str | None = None) -> Config:
    return Config.load(repo_path)


def ensure_config() -> Path:
    """Create default config file if it doesn't exist. Returns config path."""
    if not CONFIG_FILE.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text(DEFAULT_CONFIG)
    return CONFIG_FILE
