"""Publishing the release once its PR is merged."""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorelease.checkpoint import CheckpointType, RecordingReporter
from autorelease.core.changelog import extract_release_notes
from autorelease.exceptions import AutoreleaseError, NotFoundError
from autorelease.release.result import ReleaseStatus, RunResult

if TYPE_CHECKING:
    from autorelease.checkpoint import Reporter
    from autorelease.config.models import AutoreleaseConfig
    from autorelease.vcs.host import RepositoryHost


class GitHubRelease:
    """Tag a merged release PR and publish its notes.

    The notes are read back from the changelog at the merge commit's
    version heading, so whatever was edited in the PR before merging is
    what gets published.
    """

    def __init__(
        self,
        host: RepositoryHost,
        config: AutoreleaseConfig,
        reporter: Reporter | None = None,
    ) -> None:
        self.host = host
        self.config = config
        self.reporter = reporter or RecordingReporter()
        self.labels = list(config.labels)

    def create_release(self) -> RunResult:
        try:
            return self._create_release()
        except AutoreleaseError as e:
            self.reporter.checkpoint(str(e), CheckpointType.FAILURE)
            return RunResult(ReleaseStatus.FAILED, str(e))

    def _create_release(self) -> RunResult:
        pr = self.host.find_merged_release_pr(self.labels)
        if pr is None:
            message = "no recent release PRs found"
            self.reporter.checkpoint(message, CheckpointType.FAILURE)
            return RunResult(ReleaseStatus.NO_MERGED_PR, message)
        self.reporter.checkpoint(
            f"found release branch {pr.version} at {pr.sha}", CheckpointType.SUCCESS
        )

        document = self.host.get_file_contents(self.config.changelog_path).parsed_content
        try:
            notes = extract_release_notes(document, pr.version)
        except NotFoundError:
            message = f"release notes not found for version {pr.version}"
            self.reporter.checkpoint(message, CheckpointType.FAILURE)
            return RunResult(ReleaseStatus.NOTES_NOT_FOUND, message, pr.number, pr.version)
        self.reporter.checkpoint(f"found release notes:\n---\n{notes}\n---", CheckpointType.SUCCESS)

        self.host.create_release(pr.version, pr.sha, notes)
        self.host.remove_labels(self.labels, pr.number)
        message = f"created release v{pr.version} at {pr.sha}"
        self.reporter.checkpoint(message, CheckpointType.SUCCESS)
        return RunResult(ReleaseStatus.RELEASE_CREATED, message, pr.number, pr.version)
