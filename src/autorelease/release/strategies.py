"""Release strategies.

A strategy turns the commits since the last release into a
:class:`ReleasePlan`: the candidate version, its changelog entry and the
file updates of the release PR. The set of strategies is closed and
selected once from :class:`ReleaseType`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from autorelease.checkpoint import CheckpointType
from autorelease.core.candidate import INITIAL_VERSION, ReleaseCandidate, coerce_release_candidate
from autorelease.core.changelog import (
    changelog_empty,
    generate_changelog_entry,
    render_package_section,
)
from autorelease.core.commits import classify_commits, classify_message, suggest_bump
from autorelease.core.split import CommitSplit
from autorelease.core.version import BumpType, increment_version
from autorelease.exceptions import InvalidVersionError, NotFoundError, UnrecognizedReleaseModeError
from autorelease.release.result import ReleaseStatus, RunResult
from autorelease.updaters import (
    ChangelogUpdate,
    PackageJsonUpdate,
    PythonVersionFileUpdate,
    PyprojectUpdate,
    SamplesPackageJsonUpdate,
    Update,
    VersionFileUpdate,
)

if TYPE_CHECKING:
    from autorelease.checkpoint import Reporter
    from autorelease.config.models import AutoreleaseConfig
    from autorelease.core.commits import ClassifiedCommit
    from autorelease.vcs.host import RepositoryHost
    from autorelease.vcs.models import Commit, Tag

MONOREPO_RELEASE_MESSAGE = "feat!: creating a release for monorepo packages"


class ReleaseType(str, Enum):
    NODE = "node"
    PYTHON = "python"
    MONOREPO = "monorepo"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    candidate: ReleaseCandidate
    changelog_entry: str
    updates: list[Update] = field(default_factory=list)

    @property
    def version(self) -> str:
        return self.candidate.version


def _since(latest_tag: Tag | None) -> str:
    return latest_tag.sha if latest_tag else "beginning of time"


class ReleaseStrategy(ABC):
    """Computes release plans for one kind of repository."""

    release_type: ReleaseType
    # whether commits must list the files they changed
    needs_files = False

    def __init__(self, host: RepositoryHost, config: AutoreleaseConfig, reporter: Reporter) -> None:
        self.host = host
        self.config = config
        self.reporter = reporter

    @property
    def repo_url(self) -> str | None:
        return self.config.github.html_url

    def generate_entry(self, version: str, commits: Sequence[ClassifiedCommit]) -> str:
        return generate_changelog_entry(
            version,
            commits,
            repo_url=self.repo_url,
            other_types=self.config.changelog.other_types,
        )

    @abstractmethod
    def compute(self, commits: Sequence[Commit], latest_tag: Tag | None) -> ReleasePlan | RunResult:
        """Plan a release, or return the halting outcome when none is due."""


class SinglePackageStrategy(ReleaseStrategy):
    """One version for the whole repository."""

    def compute(self, commits: Sequence[Commit], latest_tag: Tag | None) -> ReleasePlan | RunResult:
        classified = classify_commits(commits)
        current = latest_tag.version if latest_tag else INITIAL_VERSION
        bump = suggest_bump(classified, current, self.config.bump_minor_pre_major)

        if bump == BumpType.NONE and latest_tag is not None and not self.config.release_as:
            return self._no_user_facing_changes(latest_tag)

        candidate = coerce_release_candidate(latest_tag, self.config.release_as, bump)
        entry = self.generate_entry(candidate.version, classified)

        # a one-line entry means no fix, feat or breaking change landed
        if changelog_empty(entry):
            return self._no_user_facing_changes(latest_tag)

        since = candidate.previous_tag or "first release"
        self.reporter.checkpoint(
            f"release candidate {candidate.version} ({bump} bump since {since})",
            CheckpointType.SUCCESS,
        )
        return ReleasePlan(candidate, entry, self.build_updates(candidate.version, entry))

    def _no_user_facing_changes(self, latest_tag: Tag | None) -> RunResult:
        message = f"no user facing commits found since {_since(latest_tag)}"
        self.reporter.checkpoint(message, CheckpointType.FAILURE)
        return RunResult(ReleaseStatus.NO_USER_FACING_CHANGES, message)

    @abstractmethod
    def build_updates(self, version: str, changelog_entry: str) -> list[Update]:
        """File updates for the release PR."""


class NodeStrategy(SinglePackageStrategy):
    release_type = ReleaseType.NODE

    def build_updates(self, version: str, changelog_entry: str) -> list[Update]:
        name = self.config.package_name
        return [
            ChangelogUpdate(self.config.changelog_path, version, changelog_entry, name),
            PackageJsonUpdate("package.json", version, changelog_entry, name),
            SamplesPackageJsonUpdate("samples/package.json", version, changelog_entry, name),
        ]


class PythonStrategy(SinglePackageStrategy):
    release_type = ReleaseType.PYTHON

    def build_updates(self, version: str, changelog_entry: str) -> list[Update]:
        name = self.config.package_name
        updates: list[Update] = [
            ChangelogUpdate(self.config.changelog_path, version, changelog_entry, name),
            PyprojectUpdate("pyproject.toml", version, changelog_entry, name),
        ]
        updates.extend(
            PythonVersionFileUpdate(path, version, changelog_entry, name)
            for path in self.config.version_files
        )
        return updates


class MonorepoStrategy(ReleaseStrategy):
    """Independently versioned packages plus a repository-wide release version.

    Each package keeps its version in ``<package>/<version_file>``. The
    repository version always moves forward (as if a breaking change had
    landed, with the pre-1.0 policy on) so that every run produces a new tag.
    """

    release_type = ReleaseType.MONOREPO
    needs_files = True

    def compute(self, commits: Sequence[Commit], latest_tag: Tag | None) -> ReleasePlan | RunResult:
        current = latest_tag.version if latest_tag else INITIAL_VERSION
        release_commit = classify_message(MONOREPO_RELEASE_MESSAGE)
        release_bump = suggest_bump([release_commit], current, pre_major=True)
        candidate = coerce_release_candidate(latest_tag, self.config.release_as, release_bump)

        packages = self.config.packages
        splitter = CommitSplit(packages.convention, packages.paths, packages.marker)
        buckets = splitter.split(commits)
        unassigned = splitter.unassigned(commits)
        if unassigned:
            self.reporter.checkpoint(
                f"{len(unassigned)} commits touched no package", CheckpointType.SUCCESS
            )

        blocks: list[str] = []
        updates: list[Update] = []
        for key, package_commits in buckets.items():
            released = self._release_package(key, classify_commits(package_commits))
            if released is None:
                continue
            block, update = released
            blocks.append(block)
            updates.append(update)

        if not updates:
            message = f"no user facing commits found in any package since {_since(latest_tag)}"
            self.reporter.checkpoint(message, CheckpointType.FAILURE)
            return RunResult(ReleaseStatus.NO_USER_FACING_CHANGES, message)

        entry = "\n\n".join([f"## {candidate.version} release highlights", *blocks])
        updates.insert(
            0,
            ChangelogUpdate(
                self.config.changelog_path, candidate.version, entry, self.config.package_name
            ),
        )
        return ReleasePlan(candidate, entry, updates)

    def _release_package(
        self, key: str, commits: Sequence[ClassifiedCommit]
    ) -> tuple[str, Update] | None:
        other_types = self.config.changelog.other_types
        # packages with only chores, docs and the like are left alone
        if changelog_empty(render_package_section(key, "", commits, other_types=other_types)):
            return None

        path = f"{key}/{self.config.packages.version_file}"
        try:
            contents = self.host.get_file_contents(path)
        except NotFoundError:
            self.reporter.checkpoint(f"no {path} found, skipping {key}", CheckpointType.FAILURE)
            return None

        current = contents.parsed_content.strip()
        try:
            bump = suggest_bump(commits, current, self.config.bump_minor_pre_major)
        except InvalidVersionError:
            self.reporter.checkpoint(
                f"failed to update {key} version: {current!r} is not a semantic version",
                CheckpointType.FAILURE,
            )
            return None
        if bump == BumpType.NONE:
            return None

        version = increment_version(current, bump)
        block = render_package_section(
            key, version, commits, repo_url=self.repo_url, other_types=other_types
        )
        self.reporter.checkpoint(f"{key}: {current} -> {version}", CheckpointType.SUCCESS)
        return block, VersionFileUpdate(path, version, block, key)


STRATEGIES: dict[ReleaseType, type[ReleaseStrategy]] = {
    ReleaseType.NODE: NodeStrategy,
    ReleaseType.PYTHON: PythonStrategy,
    ReleaseType.MONOREPO: MonorepoStrategy,
}


def get_strategy(release_type: str) -> type[ReleaseStrategy]:
    """Look up the strategy for a configured release type.

    Raises:
        UnrecognizedReleaseModeError: If the release type is unknown
    """
    try:
        return STRATEGIES[ReleaseType(release_type)]
    except ValueError:
        raise UnrecognizedReleaseModeError(
            release_type, [t.value for t in ReleaseType]
        ) from None
