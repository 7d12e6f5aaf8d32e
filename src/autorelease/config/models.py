"""Configuration models for autorelease.

Configuration lives under ``[tool.autorelease]`` in pyproject.toml::

    [tool.autorelease]
    release_type = "python"
    package_name = "my-package"
    labels = ["autorelease: pending"]
    bump_minor_pre_major = true

    [tool.autorelease.github]
    repo_url = "https://github.com/owner/repo"

    [tool.autorelease.packages]
    convention = "first-segment"
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autorelease.core.commits import DEFAULT_SKIP_RELEASE_PATTERNS, CommitType
from autorelease.core.split import PackageKeyConvention
from autorelease.exceptions import ConfigValidationError

DEFAULT_LABELS = ["autorelease: pending"]

_REPO_URL_RE = re.compile(
    r"^(?:https?://[^/]+/|git@[^:]+:|ssh://git@[^/]+/)?"
    r"(?P<owner>[^/\s:]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$"
)


def split_labels(value: object) -> object:
    """Accept labels as a comma-separated string."""
    if isinstance(value, str):
        return [label.strip() for label in value.split(",") if label.strip()]
    return value


class ChangelogConfig(BaseModel):
    """Changelog file settings."""

    model_config = ConfigDict(extra="forbid")

    path: Path = Path("CHANGELOG.md")
    other_types: list[str] = Field(
        default_factory=list,
        description="Commit types listed under 'Other' (e.g. ['docs', 'refactor'])",
    )

    @field_validator("other_types")
    @classmethod
    def _known_types(cls, value: list[str]) -> list[str]:
        known = {t.value for t in CommitType}
        unknown = [t for t in value if t not in known]
        if unknown:
            raise ValueError(f"unknown commit types: {', '.join(unknown)}")
        return value


class GitHubConfig(BaseModel):
    """Repository host settings."""

    model_config = ConfigDict(extra="forbid")

    repo_url: str | None = None
    api_url: str = "https://api.github.com"
    token: str | None = Field(default=None, repr=False)

    @property
    def owner_and_repo(self) -> tuple[str, str]:
        """Parse ``owner`` and ``repo`` from :attr:`repo_url`.

        Accepts ``owner/repo``, https URLs and ssh remotes.
        """
        if not self.repo_url:
            raise ConfigValidationError("github.repo_url is not configured")
        match = _REPO_URL_RE.match(self.repo_url.strip())
        if match is None:
            raise ConfigValidationError(f"Cannot parse repository URL: {self.repo_url}")
        return match.group("owner"), match.group("repo")

    @property
    def html_url(self) -> str | None:
        """Web URL of the repository, used for commit links."""
        if not self.repo_url:
            return None
        try:
            owner, repo = self.owner_and_repo
        except ConfigValidationError:
            return None
        return f"https://github.com/{owner}/{repo}"


class PackagesConfig(BaseModel):
    """Monorepo package discovery settings."""

    model_config = ConfigDict(extra="forbid")

    convention: PackageKeyConvention = PackageKeyConvention.FIRST_SEGMENT
    paths: list[str] = Field(default_factory=list)
    marker: str = "vendor"
    version_file: str = "VERSION"


class AutoreleaseConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    release_type: str = "node"
    package_name: str = ""
    labels: list[str] = Field(default_factory=lambda: list(DEFAULT_LABELS))
    bump_minor_pre_major: bool = False
    release_as: str | None = None
    version_files: list[str] = Field(default_factory=list)
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIP_RELEASE_PATTERNS)
    )

    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    packages: PackagesConfig = Field(default_factory=PackagesConfig)

    @field_validator("labels", mode="before")
    @classmethod
    def _split_labels(cls, value: object) -> object:
        return split_labels(value)

    @field_validator("labels")
    @classmethod
    def _labels_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one label is required to track release PRs")
        return value

    @property
    def changelog_path(self) -> str:
        return self.changelog.path.as_posix()
