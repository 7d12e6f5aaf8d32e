"""Helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from autorelease.config import load_config
from autorelease.exceptions import AutoreleaseError
from autorelease.release.result import ReleaseStatus
from autorelease.vcs.github import GitHubRepository

if TYPE_CHECKING:
    from rich.console import Console

    from autorelease.config.models import AutoreleaseConfig
    from autorelease.release.result import RunResult

# Outcomes that stop the job with a non-zero exit code
FAILING_STATUSES = frozenset({ReleaseStatus.FAILED, ReleaseStatus.NOTES_NOT_FOUND})
SUCCESS_STATUSES = frozenset({ReleaseStatus.PR_OPENED, ReleaseStatus.RELEASE_CREATED})


def load_cli_config(
    path: str | None,
    overrides: dict[str, Any],
    err_console: Console,
) -> AutoreleaseConfig:
    """Load configuration, exiting with status 1 on errors."""
    project_path = Path(path) if path else Path.cwd()
    try:
        return load_config(project_path, overrides)
    except AutoreleaseError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e


def connect(config: AutoreleaseConfig, err_console: Console) -> GitHubRepository:
    try:
        return GitHubRepository.from_config(config.github)
    except AutoreleaseError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e


def report_result(result: RunResult, console: Console, err_console: Console) -> None:
    """Print the final outcome; exit with status 1 for failing outcomes."""
    if result.status in FAILING_STATUSES:
        err_console.print(f"[red]{result.status}:[/] {result.message}")
        raise SystemExit(1)
    style = "green" if result.status in SUCCESS_STATUSES else "yellow"
    console.print(f"[{style}]{result.status}:[/] {result.message}")
