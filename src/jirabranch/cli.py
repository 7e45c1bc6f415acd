from __future__ import annotations

import asyncio
import sys

import click

from jirabranch.config import ConfigError, ensure_config, get_config
from jirabranch.console import SEVERITY_COLORS, ConsoleHost
from jirabranch.git import get_current_repo
from jirabranch.log import setup_logging
from jirabranch.workflow import WorkflowResult, WorkflowState, create_branch_from_ticket

# Restore the default excepthook so Rich (installed by Textual) doesn't
# hijack tracebacks with fancy formatting that breaks CI and log parsing.
sys.excepthook = sys.__excepthook__


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """jira-branch: create git branches from Jira tickets."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(create)


def _exit_on_failure(result: WorkflowResult) -> None:
    if result.state in (WorkflowState.FAILED, WorkflowState.CANCELLED):
        sys.exit(1)


def _report(result: WorkflowResult | None) -> None:
    """Repeat the final notification after the TUI has closed."""
    if result is None:
        click.secho("Branch creation canceled", fg="yellow")
        sys.exit(1)
    if result.message:
        click.secho(
            result.message,
            fg=SEVERITY_COLORS.get(result.severity),
            err=result.severity == "error",
        )
    _exit_on_failure(result)


@cli.command()
@click.option("--repo", default=None, help="Repository path (defaults to cwd).")
@click.option(
    "--inline/--modal",
    "inline",
    default=None,
    help="Ask on the plain terminal instead of modal dialogs.",
)
@click.option("-v", "--verbose", is_flag=True, help="Write debug logs.")
def create(repo: str | None, inline: bool | None, verbose: bool) -> None:
    """Create (or switch to) a branch for a Jira ticket."""
    setup_logging(verbose)

    repo_path = get_current_repo(repo)
    try:
        config = get_config(repo_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if inline is None:
        inline = config.prompt_style == "inline"

    if inline:
        result = asyncio.run(create_branch_from_ticket(config, ConsoleHost(), repo_path))
        _exit_on_failure(result)
        return

    from jirabranch.tui.app import JiraBranchApp

    app = JiraBranchApp(config, repo_path)
    _report(app.run())


@cli.command("config")
@click.option("--show", is_flag=True, help="Print the effective configuration.")
@click.option("--repo", default=None, help="Repository path for repo-level overrides.")
def config_cmd(show: bool, repo: str | None) -> None:
    """Create the default config file if missing and print its path."""
    path = ensure_config()
    click.echo(str(path))
    if not show:
        return

    try:
        config = get_config(get_current_repo(repo))
    except ConfigError as e:
        raise click.ClickException(str(e))

    click.echo(f"branches: {', '.join(config.branches)}")
    click.echo(f"ui.style: {config.prompt_style}")
    click.echo(f"ui.notify_timeout: {config.notify_timeout}")
    click.echo(f"git.remote: {config.remote}")
    jira = config.jira
    click.echo(f"jira.enabled: {jira.enabled}")
    click.echo(f"jira.command: {jira.command}")
    click.echo(f"jira.page_size: {jira.page_size}")
    click.echo(f"jira.max_start: {jira.max_start}")
    click.echo(f"jira.key_column: {jira.extraction.key_column}")
    click.echo(f"jira.summary_column: {jira.extraction.summary_column}")
    click.echo(f"jira.timeout: {jira.timeout}")
