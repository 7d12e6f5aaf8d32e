"""Release state machines: opening release PRs and publishing releases."""

from __future__ import annotations

from autorelease.release.github_release import GitHubRelease
from autorelease.release.release_pr import ReleasePR, release_branch
from autorelease.release.result import ReleaseStatus, RunResult
from autorelease.release.strategies import ReleasePlan, ReleaseType, get_strategy

__all__ = [
    "GitHubRelease",
    "ReleasePR",
    "ReleasePlan",
    "ReleaseStatus",
    "ReleaseType",
    "RunResult",
    "get_strategy",
    "release_branch",
]
