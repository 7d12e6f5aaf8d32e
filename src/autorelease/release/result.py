"""Outcomes of release runs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ReleaseStatus(str, Enum):
    """How a run ended.

    Only ``FAILED`` is an error; the other statuses are normal stopping
    points of the release state machines.
    """

    # release-pr
    PENDING_RELEASE = "pending-release"
    NO_COMMITS = "no-commits"
    NO_USER_FACING_CHANGES = "no-user-facing-changes"
    PR_OPENED = "pr-opened"
    # github-release
    NO_MERGED_PR = "no-merged-pr"
    NOTES_NOT_FOUND = "notes-not-found"
    RELEASE_CREATED = "release-created"

    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of a release run.

    Attributes:
        status: Final state
        message: Human-readable summary
        pr_number: Release PR involved, if any
        version: Version involved, if any
    """

    status: ReleaseStatus
    message: str
    pr_number: int | None = None
    version: str | None = None

    @property
    def failed(self) -> bool:
        return self.status == ReleaseStatus.FAILED
