"""Release PR orchestration.

:class:`ReleasePR` takes a repository from "unreleased commits exist" to
"release PR open":

1. stop if a merged release PR is still waiting to be tagged
2. fetch the commits since the latest tag; stop if there are none
3. let the release strategy compute the candidate, changelog and updates;
   stop if nothing user facing changed
4. open the release PR with those updates
5. label it
6. close every other open release PR carrying the same labels

Concurrent runs against the same repository and labels race on step 6;
callers must run one release PR job per repository at a time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorelease.checkpoint import CheckpointType, RecordingReporter
from autorelease.core.commits import filter_skip_release_commits
from autorelease.exceptions import AutoreleaseError
from autorelease.release.result import ReleaseStatus, RunResult
from autorelease.release.strategies import ReleasePlan, get_strategy

if TYPE_CHECKING:
    from autorelease.checkpoint import Reporter
    from autorelease.config.models import AutoreleaseConfig
    from autorelease.vcs.host import RepositoryHost

PR_TITLE_TEMPLATE = "chore: release {version}"
PR_BODY_TEMPLATE = ":robot: I have created a release \\*beep\\* \\*boop\\* \n---\n{changelog}"


def release_branch(version: str) -> str:
    return f"release-v{version}"


class ReleasePR:
    """Open the next release PR for a repository.

    Args:
        host: Repository host adapter
        config: Release configuration
        reporter: Receives progress checkpoints

    Raises:
        UnrecognizedReleaseModeError: If ``config.release_type`` is unknown
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
        self.strategy = get_strategy(config.release_type)(host, config, self.reporter)

    def run(self) -> RunResult:
        """Run the state machine once.

        Errors raised by the host or the release logic end the run with a
        ``FAILED`` result rather than propagating.
        """
        try:
            return self._run()
        except AutoreleaseError as e:
            self.reporter.checkpoint(str(e), CheckpointType.FAILURE)
            return RunResult(ReleaseStatus.FAILED, str(e))

    def _run(self) -> RunResult:
        pending = self.host.find_merged_release_pr(self.labels)
        if pending is not None:
            message = f"pull #{pending.number} {pending.sha} has not yet been released"
            self.reporter.checkpoint(message, CheckpointType.FAILURE)
            return RunResult(
                ReleaseStatus.PENDING_RELEASE, message, pending.number, pending.version
            )

        latest_tag = self.host.latest_tag()
        since = latest_tag.sha if latest_tag else None
        commits = self.host.commits_since_sha(since, include_files=self.strategy.needs_files)
        if not commits:
            message = f"no commits found since {since or 'beginning of time'}"
            self.reporter.checkpoint(message, CheckpointType.FAILURE)
            return RunResult(ReleaseStatus.NO_COMMITS, message)
        self.reporter.checkpoint(
            f"found {len(commits)} commits since {since or 'beginning of time'}",
            CheckpointType.SUCCESS,
        )

        # the newest commit heads the release branch even if it is skipped
        head_sha = commits[0].sha
        commits = filter_skip_release_commits(commits, self.config.skip_release_patterns)
        if not commits:
            message = f"all commits since {since or 'beginning of time'} are marked to skip release"
            self.reporter.checkpoint(message, CheckpointType.FAILURE)
            return RunResult(ReleaseStatus.NO_COMMITS, message)

        plan = self.strategy.compute(commits, latest_tag)
        if isinstance(plan, RunResult):
            return plan

        pr_number = self.open_pr(head_sha, plan)
        return RunResult(
            ReleaseStatus.PR_OPENED,
            f"opened pull #{pr_number} for release {plan.version}",
            pr_number,
            plan.version,
        )

    def open_pr(self, sha: str, plan: ReleasePlan) -> int:
        """Open and label the release PR, then close the ones it supersedes."""
        version = plan.version
        pr_number = self.host.open_pr(
            branch=release_branch(version),
            version=version,
            sha=sha,
            updates=plan.updates,
            title=PR_TITLE_TEMPLATE.format(version=version),
            body=PR_BODY_TEMPLATE.format(changelog=plan.changelog_entry),
            labels=self.labels,
        )
        self.reporter.checkpoint(f"opened pull #{pr_number}", CheckpointType.SUCCESS)
        self.host.add_labels(pr_number, self.labels)
        self.close_stale_release_prs(pr_number)
        return pr_number

    def close_stale_release_prs(self, current_pr_number: int) -> list[int]:
        """Close open release PRs other than ``current_pr_number``."""
        closed: list[int] = []
        for number in self.host.find_open_release_prs(self.labels):
            if number == current_pr_number:
                continue
            self.reporter.checkpoint(f"closing pull #{number}", CheckpointType.FAILURE)
            self.host.close_pr(number)
            closed.append(number)
        return closed
