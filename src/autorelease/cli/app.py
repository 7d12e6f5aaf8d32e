"""autorelease command line application."""

from __future__ import annotations

import typer
from rich.console import Console

from autorelease import __version__

app = typer.Typer(
    name="autorelease",
    help="Release PRs, changelogs and tags from conventional commits.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

PathOption = typer.Option(None, "--path", help="Project directory holding pyproject.toml.")
RepoUrlOption = typer.Option(None, "--repo-url", help="Repository URL or owner/repo.")
TokenOption = typer.Option(
    None, "--token", envvar="GITHUB_TOKEN", help="GitHub token.", show_default=False
)
LabelOption = typer.Option(None, "--label", help="Comma-separated labels marking release PRs.")
ApiUrlOption = typer.Option(None, "--api-url", help="GitHub API URL.")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"autorelease {__version__}")
        raise typer.Exit()


@app.callback()
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    pass


@app.command("release-pr")
def release_pr(
    path: str | None = PathOption,
    repo_url: str | None = RepoUrlOption,
    token: str | None = TokenOption,
    label: str | None = LabelOption,
    package_name: str | None = typer.Option(
        None, "--package-name", help="Name of the released package."
    ),
    release_type: str | None = typer.Option(
        None, "--release-type", help="Release strategy: node, python or monorepo."
    ),
    release_as: str | None = typer.Option(None, "--release-as", help="Force the next version."),
    bump_minor_pre_major: bool | None = typer.Option(
        None,
        "--bump-minor-pre-major/--no-bump-minor-pre-major",
        help="Bump minor instead of major for breaking changes before 1.0.0.",
        show_default=False,
    ),
    api_url: str | None = ApiUrlOption,
) -> None:
    """Open a release PR for the commits since the last release."""
    from autorelease.cli.commands.release_pr import run_release_pr

    run_release_pr(
        path=path,
        repo_url=repo_url,
        token=token,
        labels=label,
        package_name=package_name,
        release_type=release_type,
        release_as=release_as,
        bump_minor_pre_major=bump_minor_pre_major,
        api_url=api_url,
        console=console,
        err_console=err_console,
    )


@app.command("github-release")
def github_release(
    path: str | None = PathOption,
    repo_url: str | None = RepoUrlOption,
    token: str | None = TokenOption,
    label: str | None = LabelOption,
    changelog_path: str | None = typer.Option(
        None, "--changelog-path", help="Changelog file to read notes from."
    ),
    api_url: str | None = ApiUrlOption,
) -> None:
    """Tag the merged release PR and publish its release notes."""
    from autorelease.cli.commands.github_release import run_github_release

    run_github_release(
        path=path,
        repo_url=repo_url,
        token=token,
        labels=label,
        changelog_path=changelog_path,
        api_url=api_url,
        console=console,
        err_console=err_console,
    )


def main() -> None:
    app()
