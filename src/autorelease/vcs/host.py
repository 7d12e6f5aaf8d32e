"""Interface the release engine requires from a repository host."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from autorelease.updaters.base import Update
    from autorelease.vcs.models import Commit, FileContents, ReleasePullRequest, Tag


class RepositoryHost(Protocol):
    """Data access used by the orchestrator and the finalizer.

    Implementations raise :class:`~autorelease.exceptions.NotFoundError` for
    absent files and :class:`~autorelease.exceptions.HostError` for any other
    failed call. They do not retry.
    """

    def find_merged_release_pr(self, labels: Sequence[str]) -> ReleasePullRequest | None: ...

    def find_open_release_prs(self, labels: Sequence[str]) -> list[int]: ...

    def latest_tag(self) -> Tag | None: ...

    def commits_since_sha(self, sha: str | None, include_files: bool = False) -> list[Commit]:
        """Return commits newer than ``sha``, newest first.

        ``Commit.files`` is only filled in when ``include_files`` is set.
        """
        ...

    def get_file_contents(self, path: str) -> FileContents: ...

    def open_pr(
        self,
        *,
        branch: str,
        version: str,
        sha: str,
        updates: Sequence[Update],
        title: str,
        body: str,
        labels: Sequence[str],
    ) -> int: ...

    def add_labels(self, pr_number: int, labels: Sequence[str]) -> None: ...

    def close_pr(self, pr_number: int) -> None: ...

    def remove_labels(self, labels: Sequence[str], pr_number: int) -> None: ...

    def create_release(self, version: str, sha: str, notes: str) -> None: ...
