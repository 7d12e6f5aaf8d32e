"""Implementation of the 'github-release' command.

Tags the most recently merged release PR and publishes its notes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorelease.checkpoint import RichReporter
from autorelease.cli.commands._common import connect, load_cli_config, report_result
from autorelease.release import GitHubRelease

if TYPE_CHECKING:
    from rich.console import Console


def run_github_release(
    path: str | None,
    repo_url: str | None,
    token: str | None,
    labels: str | None,
    changelog_path: str | None,
    api_url: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the github-release command."""
    config = load_cli_config(
        path,
        {
            "labels": labels,
            "changelog": {"path": changelog_path},
            "github": {"repo_url": repo_url, "token": token, "api_url": api_url},
        },
        err_console,
    )
    reporter = RichReporter(console, err_console)
    release = GitHubRelease(connect(config, err_console), config, reporter)
    report_result(release.create_release(), console, err_console)
