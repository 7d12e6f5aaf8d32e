"""Implementation of the 'release-pr' command.

Opens (or refreshes) the release PR for the commits since the last tag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorelease.checkpoint import RichReporter
from autorelease.cli.commands._common import connect, load_cli_config, report_result
from autorelease.exceptions import UnrecognizedReleaseModeError
from autorelease.release import ReleasePR

if TYPE_CHECKING:
    from rich.console import Console


def run_release_pr(
    path: str | None,
    repo_url: str | None,
    token: str | None,
    labels: str | None,
    package_name: str | None,
    release_type: str | None,
    release_as: str | None,
    bump_minor_pre_major: bool | None,
    api_url: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release-pr command.

    Args:
        path: Optional path to the project directory holding pyproject.toml
        repo_url: Repository URL or ``owner/repo``
        token: GitHub token (defaults to ``GITHUB_TOKEN``)
        labels: Comma-separated labels marking release PRs
        package_name: Name of the released package
        release_type: Release strategy (node, python, monorepo)
        release_as: Explicit version for the next release
        bump_minor_pre_major: Bump minor for breaking changes before 1.0.0
        api_url: GitHub API URL
        console: Console for standard output
        err_console: Console for error output
    """
    config = load_cli_config(
        path,
        {
            "release_type": release_type,
            "package_name": package_name,
            "labels": labels,
            "release_as": release_as,
            "bump_minor_pre_major": bump_minor_pre_major,
            "github": {"repo_url": repo_url, "token": token, "api_url": api_url},
        },
        err_console,
    )

    # validate the release type before touching the network
    try:
        reporter = RichReporter(console, err_console)
        release_pr = ReleasePR(connect(config, err_console), config, reporter)
    except UnrecognizedReleaseModeError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    report_result(release_pr.run(), console, err_console)
