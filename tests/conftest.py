"""Shared fixtures for autorelease tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from autorelease.checkpoint import RecordingReporter
from autorelease.config.models import AutoreleaseConfig, GitHubConfig
from autorelease.vcs.github import GitHubRepository
from autorelease.vcs.models import Commit


@pytest.fixture
def feat_commit() -> Commit:
    return Commit("feat1234567890", "feat: add user authentication", ("src/auth.py",))


@pytest.fixture
def fix_commit() -> Commit:
    return Commit("fix1234567890", "fix(core): handle empty config", ("src/core.py",))


@pytest.fixture
def breaking_commit() -> Commit:
    return Commit(
        "break1234567890",
        "feat(api)!: drop v1 endpoints\n\nBREAKING CHANGE: v1 is gone",
        ("src/api.py",),
    )


@pytest.fixture
def sample_commits(
    feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit
) -> list[Commit]:
    """Newest first, as the host returns them."""
    return [
        Commit("chore123456789", "chore: update dependencies", ("requirements.txt",)),
        breaking_commit,
        Commit("docs123456789", "docs: improve README", ("README.md",)),
        fix_commit,
        feat_commit,
        Commit("other12345678", "Merge branch 'main' into feature", ()),
    ]


@pytest.fixture
def host() -> MagicMock:
    """Repository host with no merged release PR, no tags and no commits."""
    mock = MagicMock(spec=GitHubRepository)
    mock.find_merged_release_pr.return_value = None
    mock.find_open_release_prs.return_value = []
    mock.latest_tag.return_value = None
    mock.commits_since_sha.return_value = []
    mock.open_pr.return_value = 42
    return mock


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def config() -> AutoreleaseConfig:
    return AutoreleaseConfig(
        release_type="node",
        package_name="my-package",
        labels=["autorelease: pending"],
        github=GitHubConfig(repo_url="owner/repo"),
    )
