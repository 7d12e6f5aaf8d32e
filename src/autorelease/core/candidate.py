"""Resolution of the next release version."""

from __future__ import annotations

from dataclasses import dataclass

from autorelease.core.version import BumpType, increment_version
from autorelease.vcs.models import Tag

INITIAL_VERSION = "1.0.0"


@dataclass(frozen=True, slots=True)
class ReleaseCandidate:
    """The version a release attempt would publish.

    Recomputed on every run from the current tags; never stored.
    """

    version: str
    previous_tag: str | None = None


def coerce_release_candidate(
    latest_tag: Tag | None,
    release_as: str | None,
    bump: BumpType,
    initial_version: str = INITIAL_VERSION,
) -> ReleaseCandidate:
    """Combine the latest tag, an explicit override and a bump into a candidate.

    Args:
        latest_tag: Most recent release tag, if any
        release_as: Explicit version; used verbatim when set
        bump: Suggested bump, ignored when there is no tag or an override
        initial_version: Version of the first release

    Returns:
        The release candidate

    Raises:
        VersionIncrementError: If the tag version cannot be incremented
    """
    previous_tag = latest_tag.name if latest_tag else None

    if release_as:
        return ReleaseCandidate(release_as, previous_tag)
    if latest_tag is None:
        return ReleaseCandidate(initial_version, None)
    return ReleaseCandidate(increment_version(latest_tag.version, bump), previous_tag)
