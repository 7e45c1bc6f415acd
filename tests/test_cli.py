from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from jirabranch.cli import cli
from jirabranch.workflow import BranchPlan, WorkflowResult, WorkflowState


@pytest.fixture
def runner():
    return CliRunner()


def _current_branch(repo) -> str:
    result = subprocess.run(
        ["git", "-C", str(repo), "rev-parse", "--abbrev-ref", "HEAD"],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def _disable_jira(repo) -> None:
    (repo / ".jira-branch.toml").write_text("[jira]\nenabled = false\n")


def test_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Jira" in result.output


def test_config_creates_file(runner, _isolated_config):
    result = runner.invoke(cli, ["config"])
    assert result.exit_code == 0
    assert str(_isolated_config / "config.toml") in result.output
    assert (_isolated_config / "config.toml").exists()


def test_config_show(runner, git_repo):
    (git_repo / ".jira-branch.toml").write_text('branches = ["main", "develop"]\n')
    result = runner.invoke(cli, ["config", "--show", "--repo", str(git_repo)])
    assert result.exit_code == 0
    assert "branches: main, develop" in result.output
    assert "jira.page_size: 100" in result.output


def test_config_show_invalid(runner, git_repo):
    (git_repo / ".jira-branch.toml").write_text("branches = []\n")
    result = runner.invoke(cli, ["config", "--show", "--repo", str(git_repo)])
    assert result.exit_code != 0
    assert "non-empty list" in result.output


@pytest.mark.parametrize(
    "content,message",
    [
        ('[ui]\nnotify_timeout = "fast"\n', "ui.notify_timeout"),
        ('ui = "inline"\n', "[ui] must be a table"),
    ],
)
def test_config_show_reports_bad_values(runner, git_repo, content, message):
    (git_repo / ".jira-branch.toml").write_text(content)
    result = runner.invoke(cli, ["config", "--show", "--repo", str(git_repo)])
    assert result.exit_code == 1
    assert message in result.output
    assert not isinstance(result.exception, (ValueError, AttributeError))


def test_create_inline_outside_repo(runner, tmp_path):
    result = runner.invoke(cli, ["create", "--inline", "--repo", str(tmp_path)])
    assert result.exit_code == 1
    assert "Not inside a git repository." in result.output


def test_create_inline_new_branch(runner, git_repo):
    _disable_jira(git_repo)
    result = runner.invoke(
        cli,
        ["create", "--inline", "--repo", str(git_repo)],
        input="ABC-42\nABC-42-fix-crash\n1\n",
    )
    # No remote: the branch is kept locally and the push failure is a warning
    assert result.exit_code == 0, result.output
    assert "created locally, but push to origin failed" in result.output
    assert _current_branch(git_repo) == "ABC-42-fix-crash"


def test_create_inline_accepts_default_name(runner, git_repo):
    _disable_jira(git_repo)
    result = runner.invoke(
        cli,
        ["create", "--inline", "--repo", str(git_repo)],
        input="ABC-42\n\n1\n",
    )
    assert result.exit_code == 0, result.output
    assert _current_branch(git_repo) == "ABC-42"


def test_create_inline_zero_choice_goes_back_to_branch_name(runner, git_repo):
    _disable_jira(git_repo)
    result = runner.invoke(
        cli,
        ["create", "--inline", "--repo", str(git_repo)],
        input="FEAT-123\nFEAT-123-add-login\n0\n\n1\n",
    )
    assert result.exit_code == 0, result.output
    assert "Invalid choice. Please select a valid branch." in result.output
    assert "[FEAT-123-add-login]" in result.output
    assert _current_branch(git_repo) == "FEAT-123-add-login"


def test_create_inline_switches_to_existing(runner, git_repo):
    _disable_jira(git_repo)
    subprocess.run(
        ["git", "-C", str(git_repo), "branch", "ABC-42"], check=True, capture_output=True
    )
    result = runner.invoke(
        cli,
        ["create", "--inline", "--repo", str(git_repo)],
        input="ABC-42\n\n1\n",
    )
    assert result.exit_code == 0, result.output
    assert "Branch already exists. Switching to the existing branch." in result.output
    assert _current_branch(git_repo) == "ABC-42"


def test_create_inline_tag_with_same_name_creates_branch(runner, git_repo):
    _disable_jira(git_repo)
    subprocess.run(
        ["git", "-C", str(git_repo), "tag", "ABC-42"], check=True, capture_output=True
    )
    result = runner.invoke(
        cli,
        ["create", "--inline", "--repo", str(git_repo)],
        input="ABC-42\n\n1\n",
    )
    assert result.exit_code == 0, result.output
    assert "Branch already exists" not in result.output
    head = subprocess.run(
        ["git", "-C", str(git_repo), "symbolic-ref", "HEAD"],
        capture_output=True,
        text=True,
        check=True,
    )
    assert head.stdout.strip() == "refs/heads/ABC-42"


def test_create_inline_no_ticket(runner, git_repo):
    result = runner.invoke(
        cli,
        ["create", "--inline", "--repo", str(git_repo)],
        input="\n",
    )
    assert result.exit_code == 1
    assert "No Jira ticket provided" in result.output


def test_create_inline_from_config_style(runner, git_repo):
    (git_repo / ".jira-branch.toml").write_text(
        '[ui]\nstyle = "inline"\n\n[jira]\nenabled = false\n'
    )
    result = runner.invoke(cli, ["create", "--repo", str(git_repo)], input="\n")
    assert result.exit_code == 1
    assert "No Jira ticket provided" in result.output


def test_create_invalid_config(runner, git_repo):
    (git_repo / ".jira-branch.toml").write_text('[ui]\nstyle = "popup"\n')
    result = runner.invoke(cli, ["create", "--repo", str(git_repo)])
    assert result.exit_code != 0
    assert "ui.style" in result.output


def test_create_modal_reports_result(runner, git_repo):
    result_value = WorkflowResult(
        state=WorkflowState.DONE,
        plan=BranchPlan(branch_name="ABC-42-fix-crash"),
        message="Branch created and pushed: ABC-42-fix-crash",
    )
    app = MagicMock()
    app.run.return_value = result_value
    with patch("jirabranch.tui.app.JiraBranchApp", return_value=app) as app_cls:
        result = runner.invoke(cli, ["create", "--modal", "--repo", str(git_repo)])

    assert result.exit_code == 0, result.output
    assert "Branch created and pushed: ABC-42-fix-crash" in result.output
    config, repo_path = app_cls.call_args.args
    assert repo_path == str(git_repo.resolve())


def test_create_modal_quit_exits_nonzero(runner, git_repo):
    app = MagicMock()
    app.run.return_value = None
    with patch("jirabranch.tui.app.JiraBranchApp", return_value=app):
        result = runner.invoke(cli, ["create", "--modal", "--repo", str(git_repo)])

    assert result.exit_code == 1
    assert "Branch creation canceled" in result.output


def test_no_subcommand_runs_create(runner):
    with patch("jirabranch.cli.get_current_repo", return_value=None), \
         patch("jirabranch.tui.app.JiraBranchApp") as app_cls:
        app_cls.return_value.run.return_value = WorkflowResult(
            state=WorkflowState.FAILED,
            plan=BranchPlan(),
            message="Not inside a git repository.",
            severity="error",
        )
        result = runner.invoke(cli, [])

    assert result.exit_code == 1
    assert app_cls.called
