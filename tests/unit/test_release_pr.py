"""Tests for the release PR state machine and release strategies."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from autorelease.checkpoint import RecordingReporter
from autorelease.config.models import AutoreleaseConfig, PackagesConfig
from autorelease.exceptions import HostError, NotFoundError, UnrecognizedReleaseModeError
from autorelease.release import ReleasePR, ReleaseStatus, release_branch
from autorelease.release.strategies import ReleaseType, get_strategy
from autorelease.updaters import (
    ChangelogUpdate,
    PackageJsonUpdate,
    PyprojectUpdate,
    PythonVersionFileUpdate,
    SamplesPackageJsonUpdate,
    VersionFileUpdate,
)
from autorelease.vcs.models import Commit, FileContents, ReleasePullRequest, Tag


def _configure(config: AutoreleaseConfig, **changes) -> AutoreleaseConfig:
    return config.model_copy(update=changes)


def _opened(host: MagicMock) -> dict:
    host.open_pr.assert_called_once()
    return host.open_pr.call_args.kwargs


class TestReleaseBranch:
    def test_release_branch(self):
        assert release_branch("1.2.4") == "release-v1.2.4"


class TestPendingRelease:
    """A merged but untagged release PR blocks new release PRs."""

    def test_pending_release_stops_run(self, host: MagicMock, config, reporter):
        host.find_merged_release_pr.return_value = ReleasePullRequest(
            7, "mergesha", "1.2.4", ("autorelease: pending",)
        )

        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.PENDING_RELEASE
        assert result.pr_number == 7
        assert result.message == "pull #7 mergesha has not yet been released"
        host.find_merged_release_pr.assert_called_once_with(["autorelease: pending"])
        host.commits_since_sha.assert_not_called()
        host.open_pr.assert_not_called()
        host.add_labels.assert_not_called()
        host.create_release.assert_not_called()


class TestNoCommits:
    def test_no_commits_since_tag(self, host: MagicMock, config, reporter):
        host.latest_tag.return_value = Tag("v1.2.3", "sha0", "1.2.3")

        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.NO_COMMITS
        assert result.message == "no commits found since sha0"
        host.commits_since_sha.assert_called_once_with("sha0", include_files=False)
        host.open_pr.assert_not_called()

    def test_no_commits_in_new_repository(self, host: MagicMock, config, reporter):
        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.NO_COMMITS
        host.commits_since_sha.assert_called_once_with(None, include_files=False)

    def test_all_commits_skip_release(self, host: MagicMock, config, reporter):
        """Commits marked [skip release] do not count."""
        host.latest_tag.return_value = Tag("v1.2.3", "sha0", "1.2.3")
        host.commits_since_sha.return_value = [Commit("c1", "fix: typo [skip release]")]

        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.NO_COMMITS
        host.open_pr.assert_not_called()


class TestSinglePackageRelease:
    """Release PRs for node and python repositories."""

    def test_patch_release(self, host: MagicMock, config, reporter):
        """A fix since v1.2.3 opens the 1.2.4 release PR."""
        host.latest_tag.return_value = Tag("v1.2.3", "sha0", "1.2.3")
        host.commits_since_sha.return_value = [
            Commit("c2", "fix: null pointer (#1)"),
            Commit("c1", "chore: update deps"),
        ]

        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.PR_OPENED
        assert result.version == "1.2.4"
        assert result.pr_number == 42
        kwargs = _opened(host)
        assert kwargs["branch"] == "release-v1.2.4"
        assert kwargs["sha"] == "c2"
        assert kwargs["title"] == "chore: release 1.2.4"
        assert kwargs["body"].startswith(":robot: I have created a release \\*beep\\* \\*boop\\*")
        assert "### Bug Fixes" in kwargs["body"]
        assert "### Features" not in kwargs["body"]
        assert [type(u) for u in kwargs["updates"]] == [
            ChangelogUpdate,
            PackageJsonUpdate,
            SamplesPackageJsonUpdate,
        ]
        assert {u.version for u in kwargs["updates"]} == {"1.2.4"}
        host.add_labels.assert_called_once_with(42, ["autorelease: pending"])

    def test_first_release(self, host: MagicMock, config, reporter):
        """Without a tag the first release is 1.0.0."""
        host.commits_since_sha.return_value = [Commit("c1", "feat: initial api")]

        result = ReleasePR(host, config, reporter).run()

        assert result.version == "1.0.0"
        assert _opened(host)["branch"] == "release-v1.0.0"

    def test_breaking_change_pre_major(self, host: MagicMock, config, reporter):
        """With the pre-1.0 policy a breaking change bumps the minor version."""
        host.latest_tag.return_value = Tag("v0.9.0", "sha0", "0.9.0")
        host.commits_since_sha.return_value = [Commit("c1", "feat!: drop legacy api")]
        config = _configure(config, bump_minor_pre_major=True)

        result = ReleasePR(host, config, reporter).run()

        assert result.version == "0.10.0"
        assert "### Breaking Changes" in _opened(host)["body"]

    def test_breaking_change_major(self, host: MagicMock, config, reporter):
        host.latest_tag.return_value = Tag("v0.9.0", "sha0", "0.9.0")
        host.commits_since_sha.return_value = [Commit("c1", "feat!: drop legacy api")]

        assert ReleasePR(host, config, reporter).run().version == "1.0.0"

    def test_no_user_facing_changes(self, host: MagicMock, config, reporter):
        """Only chores and docs since the tag: no release PR."""
        host.latest_tag.return_value = Tag("v1.2.3", "sha0", "1.2.3")
        host.commits_since_sha.return_value = [
            Commit("c2", "docs: readme"),
            Commit("c1", "chore: update deps"),
        ]

        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.NO_USER_FACING_CHANGES
        assert result.message == "no user facing commits found since sha0"
        host.open_pr.assert_not_called()
        host.add_labels.assert_not_called()

    def test_release_as_override(self, host: MagicMock, config, reporter):
        """An explicit release version wins over the computed bump."""
        host.latest_tag.return_value = Tag("v1.2.3", "sha0", "1.2.3")
        host.commits_since_sha.return_value = [Commit("c1", "fix: bug")]
        config = _configure(config, release_as="2.0.0")

        assert ReleasePR(host, config, reporter).run().version == "2.0.0"

    def test_skipped_commits_excluded_from_changelog(self, host: MagicMock, config, reporter):
        """Skipped commits are left out, but the branch still starts at the newest commit."""
        host.latest_tag.return_value = Tag("v1.2.3", "sha0", "1.2.3")
        host.commits_since_sha.return_value = [
            Commit("c2", "feat: experiment [skip release]"),
            Commit("c1", "fix: bug"),
        ]

        result = ReleasePR(host, config, reporter).run()

        assert result.version == "1.2.4"
        kwargs = _opened(host)
        assert kwargs["sha"] == "c2"
        assert "experiment" not in kwargs["body"]

    def test_python_release(self, host: MagicMock, config, reporter):
        host.latest_tag.return_value = Tag("v1.2.3", "sha0", "1.2.3")
        host.commits_since_sha.return_value = [Commit("c1", "feat: new flag")]
        config = _configure(
            config, release_type="python", version_files=["src/pkg/__init__.py"]
        )

        result = ReleasePR(host, config, reporter).run()

        assert result.version == "1.3.0"
        updates = _opened(host)["updates"]
        assert [type(u) for u in updates] == [
            ChangelogUpdate,
            PyprojectUpdate,
            PythonVersionFileUpdate,
        ]
        assert updates[2].path == "src/pkg/__init__.py"

    def test_default_reporter(self, host: MagicMock, config):
        host.commits_since_sha.return_value = [Commit("c1", "fix: bug")]

        release_pr = ReleasePR(host, config)
        release_pr.run()

        assert isinstance(release_pr.reporter, RecordingReporter)
        assert release_pr.reporter.messages


class TestStaleReleasePRs:
    """Superseded release PRs are closed once the new one is open."""

    def test_closes_other_release_prs(self, host: MagicMock, config, reporter):
        host.commits_since_sha.return_value = [Commit("c1", "fix: bug")]
        host.find_open_release_prs.return_value = [40, 42, 41]

        ReleasePR(host, config, reporter).run()

        host.find_open_release_prs.assert_called_once_with(["autorelease: pending"])
        assert [c.args for c in host.close_pr.call_args_list] == [(40,), (41,)]
        assert "closing pull #40" in reporter.failures

    def test_keeps_current_pr(self, host: MagicMock, config, reporter):
        host.find_open_release_prs.return_value = [42]

        closed = ReleasePR(host, config, reporter).close_stale_release_prs(42)

        assert closed == []
        host.close_pr.assert_not_called()

    def test_labels_added_before_closing(self, host: MagicMock, config, reporter):
        host.commits_since_sha.return_value = [Commit("c1", "fix: bug")]
        host.find_open_release_prs.return_value = [40]

        ReleasePR(host, config, reporter).run()

        names = [c[0] for c in host.method_calls]
        assert names.index("open_pr") < names.index("add_labels") < names.index("close_pr")


class TestFailures:
    def test_host_error_fails_run(self, host: MagicMock, config, reporter):
        """Host errors end the run with FAILED instead of raising."""
        host.commits_since_sha.side_effect = HostError("GitHub API error (502): bad gateway", 502)

        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.FAILED
        assert result.failed
        assert "bad gateway" in result.message
        assert reporter.failures == [result.message]

    def test_open_pr_error_fails_run(self, host: MagicMock, config, reporter):
        host.commits_since_sha.return_value = [Commit("c1", "fix: bug")]
        host.open_pr.side_effect = HostError("GitHub API error (422): validation failed", 422)

        result = ReleasePR(host, config, reporter).run()

        assert result.status == ReleaseStatus.FAILED
        host.add_labels.assert_not_called()

    def test_unknown_release_type(self, host: MagicMock, config):
        """Unknown release types are rejected before any host call."""
        with pytest.raises(UnrecognizedReleaseModeError, match="'go'"):
            ReleasePR(host, _configure(config, release_type="go"))

        assert host.method_calls == []


class TestGetStrategy:
    @pytest.mark.parametrize("release_type", list(ReleaseType))
    def test_known(self, release_type: ReleaseType):
        assert get_strategy(release_type.value).release_type == release_type

    def test_unknown(self):
        with pytest.raises(UnrecognizedReleaseModeError, match="node, python, monorepo"):
            get_strategy("ruby")


class TestMonorepoRelease:
    """Per-package versions with a repository-wide release version."""

    @pytest.fixture
    def monorepo_config(self, config: AutoreleaseConfig) -> AutoreleaseConfig:
        return _configure(config, release_type="monorepo", packages=PackagesConfig())

    @staticmethod
    def _versions(**versions: str):
        def get_file_contents(path: str, ref: str | None = None) -> FileContents:
            key = path.split("/")[0]
            if key not in versions:
                raise NotFoundError(f"Not found: {path}")
            return FileContents(path, f"{versions[key]}\n", f"blob-{key}")

        return get_file_contents

    def test_releases_changed_packages(self, host: MagicMock, monorepo_config, reporter):
        host.latest_tag.return_value = Tag("v1.0.0", "sha0", "1.0.0")
        host.commits_since_sha.return_value = [
            Commit("c3", "feat: buckets", ("Storage/src/Buckets.php",)),
            Commit("c2", "fix: retries", ("Storage/src/Client.php", "Pubsub/src/Topic.php")),
            Commit("c1", "chore: lint", ("Spanner/src/Db.php",)),
            Commit("c0", "docs: readme", ("README.md",)),
        ]
        host.get_file_contents.side_effect = self._versions(Storage="1.2.0", Pubsub="0.4.1")

        result = ReleasePR(host, monorepo_config, reporter).run()

        assert result.status == ReleaseStatus.PR_OPENED
        assert result.version == "2.0.0"
        kwargs = _opened(host)
        assert kwargs["branch"] == "release-v2.0.0"
        updates = kwargs["updates"]
        assert isinstance(updates[0], ChangelogUpdate)
        assert [(u.path, u.version) for u in updates[1:]] == [
            ("Pubsub/VERSION", "0.4.2"),
            ("Storage/VERSION", "1.3.0"),
        ]
        assert all(isinstance(u, VersionFileUpdate) for u in updates[1:])

        body = kwargs["body"]
        assert "## 2.0.0 release highlights" in body
        assert body.index("### Pubsub 0.4.2") < body.index("### Storage 1.3.0")
        assert "Spanner" not in body
        assert "1 commits touched no package" in reporter.messages
        host.commits_since_sha.assert_called_once_with("sha0", include_files=True)

    def test_pre_major_repository_version(self, host: MagicMock, monorepo_config, reporter):
        """Before 1.0 the repository version moves by minor."""
        host.latest_tag.return_value = Tag("v0.5.0", "sha0", "0.5.0")
        host.commits_since_sha.return_value = [Commit("c1", "fix: x", ("Storage/a.php",))]
        host.get_file_contents.side_effect = self._versions(Storage="1.2.0")

        assert ReleasePR(host, monorepo_config, reporter).run().version == "0.6.0"

    def test_missing_version_file_skips_package(self, host: MagicMock, monorepo_config, reporter):
        """A package without a VERSION file is skipped with a warning."""
        host.latest_tag.return_value = Tag("v1.0.0", "sha0", "1.0.0")
        host.commits_since_sha.return_value = [
            Commit("c2", "feat: new", ("Bigtable/a.php",)),
            Commit("c1", "fix: x", ("Storage/a.php",)),
        ]
        host.get_file_contents.side_effect = self._versions(Storage="1.2.0")

        result = ReleasePR(host, monorepo_config, reporter).run()

        assert result.status == ReleaseStatus.PR_OPENED
        assert [u.path for u in _opened(host)["updates"]] == ["CHANGELOG.md", "Storage/VERSION"]
        assert "no Bigtable/VERSION found, skipping Bigtable" in reporter.failures

    def test_invalid_package_version_skips_package(
        self, host: MagicMock, monorepo_config, reporter
    ):
        host.latest_tag.return_value = Tag("v1.0.0", "sha0", "1.0.0")
        host.commits_since_sha.return_value = [
            Commit("c2", "feat: new", ("Bigtable/a.php",)),
            Commit("c1", "fix: x", ("Storage/a.php",)),
        ]
        host.get_file_contents.side_effect = self._versions(Bigtable="dev", Storage="1.2.0")

        result = ReleasePR(host, monorepo_config, reporter).run()

        assert [u.path for u in _opened(host)["updates"]] == ["CHANGELOG.md", "Storage/VERSION"]
        assert any("Bigtable" in failure for failure in reporter.failures)
        assert result.status == ReleaseStatus.PR_OPENED

    def test_host_error_fails_run(self, host: MagicMock, monorepo_config, reporter):
        """Errors other than a missing file abort the run."""
        host.commits_since_sha.return_value = [Commit("c1", "fix: x", ("Storage/a.php",))]
        host.get_file_contents.side_effect = HostError("GitHub API error (500): boom", 500)

        result = ReleasePR(host, monorepo_config, reporter).run()

        assert result.status == ReleaseStatus.FAILED
        host.open_pr.assert_not_called()

    def test_no_package_to_release(self, host: MagicMock, monorepo_config, reporter):
        host.latest_tag.return_value = Tag("v1.0.0", "sha0", "1.0.0")
        host.commits_since_sha.return_value = [
            Commit("c2", "chore: lint", ("Storage/a.php",)),
            Commit("c1", "fix: x", ("README.md",)),
        ]

        result = ReleasePR(host, monorepo_config, reporter).run()

        assert result.status == ReleaseStatus.NO_USER_FACING_CHANGES
        host.get_file_contents.assert_not_called()
        host.open_pr.assert_not_called()

    def test_explicit_package_paths(self, host: MagicMock, monorepo_config, reporter):
        config = _configure(
            monorepo_config,
            packages=PackagesConfig(paths=["packages/core"], version_file="version.txt"),
        )
        host.commits_since_sha.return_value = [
            Commit("c1", "feat: plugins", ("packages/core/src/plugins.py",)),
        ]
        host.get_file_contents.return_value = FileContents(
            "packages/core/version.txt", "2.1.0\n", "blob"
        )

        result = ReleasePR(host, config, reporter).run()

        assert result.version == "1.0.0"
        host.get_file_contents.assert_called_once_with("packages/core/version.txt")
        assert _opened(host)["updates"][1].version == "2.2.0"
