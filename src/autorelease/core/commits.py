"""Conventional commit classification and bump inference.

Parses commit messages following the Conventional Commits convention
(https://www.conventionalcommits.org/) and reduces a batch of them to a
single semantic version bump.

Classification never fails: a message that does not follow the
convention is classified as ``other`` and ignored by bump inference and
changelog generation.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from autorelease.core.version import BumpType, Version
from autorelease.vcs.models import Commit

# type(scope)!: description
_HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z]+(?:[ -][A-Za-z]+)?)"
    r"(?:\((?P<scope>[^()\r\n]*)\))?"
    r"(?P<breaking>!)?"
    r":[ \t]+(?P<description>\S.*)$"
)

_BREAKING_FOOTER_RE = re.compile(r"^BREAKING[ -]CHANGE:", re.MULTILINE)

DEFAULT_SKIP_RELEASE_PATTERNS = ("[skip release]", "[release skip]", "[no release]")


class CommitType(str, Enum):
    """Commit categories recognized in conventional commit headers."""

    FEAT = "feat"
    FIX = "fix"
    CHORE = "chore"
    DOCS = "docs"
    REFACTOR = "refactor"
    PERF = "perf"
    BREAKING = "breaking"
    BUILD = "build"
    CI = "ci"
    STYLE = "style"
    TEST = "test"
    REVERT = "revert"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


_HEADER_TYPE_ALIASES = {
    "breaking change": CommitType.BREAKING,
    "breaking-change": CommitType.BREAKING,
}


@dataclass(frozen=True, slots=True)
class ClassifiedCommit:
    """A commit message broken into its conventional commit parts.

    Attributes:
        sha: SHA of the classified commit (empty for synthetic messages)
        type: Commit category
        scope: Optional scope from ``type(scope): ...``
        breaking: Whether the commit announces a breaking change
        description: Header description, or the full first line for
            non-conventional messages
    """

    sha: str
    type: CommitType
    scope: str | None
    breaking: bool
    description: str

    @property
    def is_conventional(self) -> bool:
        return self.type != CommitType.OTHER

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


def classify_message(message: str, sha: str = "") -> ClassifiedCommit:
    """Classify a single commit message.

    Args:
        message: Full commit message
        sha: SHA to carry over to the result

    Returns:
        The classified commit; ``type`` is ``OTHER`` when the header does not
        follow the convention
    """
    header, _, body = message.strip().partition("\n")
    header = header.strip()

    match = _HEADER_RE.match(header)
    if match is None:
        return ClassifiedCommit(sha, CommitType.OTHER, None, False, header)

    raw_type = match.group("type").lower()
    commit_type = _HEADER_TYPE_ALIASES.get(raw_type)
    if commit_type is None:
        try:
            commit_type = CommitType(raw_type)
        except ValueError:
            return ClassifiedCommit(sha, CommitType.OTHER, None, False, header)
    if commit_type == CommitType.OTHER:
        # "other: ..." is not a conventional type either
        return ClassifiedCommit(sha, CommitType.OTHER, None, False, header)

    scope = match.group("scope") or None
    breaking = (
        commit_type == CommitType.BREAKING
        or match.group("breaking") is not None
        or _BREAKING_FOOTER_RE.search(body) is not None
    )
    return ClassifiedCommit(
        sha=sha,
        type=commit_type,
        scope=scope.strip() if scope else None,
        breaking=breaking,
        description=match.group("description").strip(),
    )


def classify(commit: Commit) -> ClassifiedCommit:
    """Classify a fetched commit."""
    return classify_message(commit.message, commit.sha)


def classify_commits(commits: Iterable[Commit]) -> list[ClassifiedCommit]:
    """Classify commits, preserving their order."""
    return [classify(commit) for commit in commits]


def suggest_bump(
    commits: Iterable[ClassifiedCommit],
    current_version: Version | str,
    pre_major: bool = False,
) -> BumpType:
    """Reduce classified commits to a single version bump.

    Only the presence of each category matters, so the result does not
    depend on commit order:

    - any breaking change: ``MAJOR``, or ``MINOR`` while the current major
      version is 0 and ``pre_major`` is set
    - otherwise any ``feat``: ``MINOR``
    - otherwise any ``fix`` or ``perf``: ``PATCH``
    - otherwise ``NONE`` (no release warranted)

    Args:
        commits: Classified commits
        current_version: Version the bump would apply to
        pre_major: Treat breaking changes as minor bumps before 1.0.0

    Returns:
        The bump type
    """
    if isinstance(current_version, str):
        current_version = Version.parse(current_version)

    types: set[CommitType] = set()
    breaking = False
    for commit in commits:
        if not commit.is_conventional:
            continue
        types.add(commit.type)
        breaking = breaking or commit.breaking

    if breaking:
        if pre_major and current_version.major == 0:
            return BumpType.MINOR
        return BumpType.MAJOR
    if CommitType.FEAT in types:
        return BumpType.MINOR
    if types & {CommitType.FIX, CommitType.PERF}:
        return BumpType.PATCH
    return BumpType.NONE


def filter_skip_release_commits(
    commits: Sequence[Commit],
    patterns: Sequence[str] = DEFAULT_SKIP_RELEASE_PATTERNS,
) -> list[Commit]:
    """Drop commits whose message contains a skip-release marker.

    Markers are matched case-insensitively anywhere in the message.
    """
    if not patterns:
        return list(commits)
    lowered = [p.lower() for p in patterns]
    return [c for c in commits if not any(p in c.message.lower() for p in lowered)]
