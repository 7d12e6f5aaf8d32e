"""Core release decision logic.

- Semantic version parsing and incrementing
- Conventional commit classification and bump inference
- Changelog entry generation and release notes extraction
- Monorepo commit partitioning
- Release candidate resolution
"""

from __future__ import annotations

from autorelease.core.candidate import ReleaseCandidate, coerce_release_candidate
from autorelease.core.changelog import (
    changelog_empty,
    extract_release_notes,
    generate_changelog_entry,
)
from autorelease.core.commits import (
    ClassifiedCommit,
    CommitType,
    classify,
    classify_commits,
    classify_message,
    suggest_bump,
)
from autorelease.core.split import CommitSplit, PackageKeyConvention
from autorelease.core.version import BumpType, Version, parse_version

__all__ = [
    # Version
    "BumpType",
    "Version",
    "parse_version",
    # Commits
    "ClassifiedCommit",
    "CommitType",
    "classify",
    "classify_commits",
    "classify_message",
    "suggest_bump",
    # Changelog
    "changelog_empty",
    "extract_release_notes",
    "generate_changelog_entry",
    # Monorepo
    "CommitSplit",
    "PackageKeyConvention",
    # Candidate
    "ReleaseCandidate",
    "coerce_release_candidate",
]
