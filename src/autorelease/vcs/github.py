"""GitHub implementation of :class:`~autorelease.vcs.host.RepositoryHost`.

A thin PyGithub wrapper. GitHub errors are translated into
:class:`~autorelease.exceptions.NotFoundError` (404) and
:class:`~autorelease.exceptions.HostError` (anything else, including
transport failures); nothing is retried here.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterable, Sequence
from itertools import islice
from typing import TYPE_CHECKING, ParamSpec, TypeVar

import requests
from github import Auth, Github, GithubException, UnknownObjectException

from autorelease.core.version import Version
from autorelease.exceptions import (
    HostError,
    InvalidVersionError,
    NotFoundError,
    VersionNotFoundError,
)
from autorelease.vcs.models import Commit, FileContents, ReleasePullRequest, Tag

if TYPE_CHECKING:
    from github.PullRequest import PullRequest
    from github.Repository import Repository

    from autorelease.config.models import GitHubConfig
    from autorelease.updaters.base import Update

P = ParamSpec("P")
R = TypeVar("R")

# Pull requests and tags inspected per lookup (one API page)
PAGE_SIZE = 100

# Upper bound on commits read back from the default branch
MAX_COMMITS = 250

_RELEASE_BRANCH_RE = re.compile(r"^release-v(?P<version>.+)$")


def _error_message(error: GithubException) -> str:
    data = error.data
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(error)


def translate_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Re-raise PyGithub exceptions as autorelease errors."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except UnknownObjectException as e:
            raise NotFoundError(f"Not found: {_error_message(e)}") from e
        except GithubException as e:
            if e.status == 404:
                raise NotFoundError(f"Not found: {_error_message(e)}") from e
            raise HostError(f"GitHub API error ({e.status}): {_error_message(e)}", e.status) from e
        except requests.RequestException as e:
            raise HostError(f"GitHub request failed: {e}") from e

    return wrapper


def _has_labels(pr: PullRequest, labels: Iterable[str]) -> bool:
    names = {label.name for label in pr.labels}
    return set(labels) <= names


class GitHubRepository:
    """Repository host backed by the GitHub REST API.

    Args:
        owner: Repository owner
        repo: Repository name
        token: API token; anonymous access when ``None``
        api_url: API base URL (GitHub Enterprise: ``https://host/api/v3``)
        client: Pre-built client, mainly for tests
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        client: Github | None = None,
    ) -> None:
        self.owner = owner
        self.repo_name = repo
        if client is None:
            auth = Auth.Token(token) if token else None
            client = Github(auth=auth, base_url=api_url)
        self.client = client
        self._repo: Repository | None = None

    @classmethod
    def from_config(cls, config: GitHubConfig) -> GitHubRepository:
        owner, repo = config.owner_and_repo
        return cls(owner, repo, token=config.token, api_url=config.api_url)

    @property
    def repo(self) -> Repository:
        if self._repo is None:
            self._repo = self.client.get_repo(f"{self.owner}/{self.repo_name}")
        return self._repo

    @property
    def default_branch(self) -> str:
        return self.repo.default_branch

    @translate_errors
    def find_merged_release_pr(self, labels: Sequence[str]) -> ReleasePullRequest | None:
        pulls = self.repo.get_pulls(
            state="closed", sort="updated", direction="desc", base=self.default_branch
        )
        for pr in islice(pulls, PAGE_SIZE):
            if not pr.merged or not _has_labels(pr, labels):
                continue
            match = _RELEASE_BRANCH_RE.match(pr.head.ref)
            if match is None:
                continue
            return ReleasePullRequest(
                number=pr.number,
                sha=pr.merge_commit_sha,
                version=match.group("version"),
                labels=tuple(label.name for label in pr.labels),
            )
        return None

    @translate_errors
    def find_open_release_prs(self, labels: Sequence[str]) -> list[int]:
        pulls = self.repo.get_pulls(state="open", sort="created", direction="desc")
        return [pr.number for pr in islice(pulls, PAGE_SIZE) if _has_labels(pr, labels)]

    @translate_errors
    def latest_tag(self) -> Tag | None:
        """Return the tag with the highest semantic version, if any."""
        best: tuple[Version, Tag] | None = None
        for tag in islice(self.repo.get_tags(), PAGE_SIZE):
            try:
                version = Version.parse(tag.name)
            except InvalidVersionError:
                continue
            if best is None or version > best[0]:
                best = (version, Tag(tag.name, tag.commit.sha, str(version)))
        return best[1] if best else None

    @translate_errors
    def commits_since_sha(self, sha: str | None, include_files: bool = False) -> list[Commit]:
        """Return commits on the default branch newer than ``sha``, newest first.

        At most :data:`MAX_COMMITS` commits are returned. Changed files cost
        one request per commit and are only listed when ``include_files`` is set.
        """
        commits: list[Commit] = []
        for commit in islice(self.repo.get_commits(sha=self.default_branch), MAX_COMMITS):
            if sha is not None and commit.sha == sha:
                break
            files = tuple(f.filename for f in commit.files) if include_files else ()
            commits.append(Commit(commit.sha, commit.commit.message, files))
        return commits

    @translate_errors
    def get_file_contents(self, path: str, ref: str | None = None) -> FileContents:
        contents = self.repo.get_contents(path, ref=ref or self.default_branch)
        if isinstance(contents, list):
            raise NotFoundError(f"{path} is a directory")
        return FileContents(path, contents.decoded_content.decode("utf-8"), contents.sha)

    @translate_errors
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
    ) -> int:
        """Create or reset ``branch`` at ``sha``, commit the updates and open a PR.

        If a PR from ``branch`` is already open it is updated and reused.
        ``labels`` are applied separately through :meth:`add_labels`.
        """
        self._reset_branch(branch, sha)
        for update in updates:
            self._apply_update(branch, update, f"chore: release {version}")

        existing = self.repo.get_pulls(state="open", head=f"{self.owner}:{branch}")
        for pr in islice(existing, 1):
            pr.edit(title=title, body=body)
            return pr.number

        pr = self.repo.create_pull(title=title, body=body, head=branch, base=self.default_branch)
        return pr.number

    def _reset_branch(self, branch: str, sha: str) -> None:
        try:
            ref = self.repo.get_git_ref(f"heads/{branch}")
        except UnknownObjectException:
            self.repo.create_git_ref(ref=f"refs/heads/{branch}", sha=sha)
        else:
            ref.edit(sha=sha, force=True)

    def _apply_update(self, branch: str, update: Update, message: str) -> None:
        try:
            current = self.get_file_contents(update.path, ref=branch)
        except NotFoundError:
            if update.create:
                self.repo.create_file(
                    update.path, message, update.update_content(""), branch=branch
                )
            elif not update.optional:
                raise
            return

        try:
            new_content = update.update_content(current.parsed_content)
        except VersionNotFoundError:
            if update.optional:
                return
            raise
        if new_content != current.parsed_content:
            self.repo.update_file(update.path, message, new_content, current.sha, branch=branch)

    @translate_errors
    def add_labels(self, pr_number: int, labels: Sequence[str]) -> None:
        self.repo.get_issue(pr_number).add_to_labels(*labels)

    @translate_errors
    def close_pr(self, pr_number: int) -> None:
        self.repo.get_pull(pr_number).edit(state="closed")

    @translate_errors
    def remove_labels(self, labels: Sequence[str], pr_number: int) -> None:
        issue = self.repo.get_issue(pr_number)
        present = {label.name for label in issue.labels}
        for label in labels:
            if label in present:
                issue.remove_from_labels(label)

    @translate_errors
    def create_release(self, version: str, sha: str, notes: str) -> None:
        tag = f"v{version}"
        self.repo.create_git_release(tag=tag, name=tag, message=notes, target_commitish=sha)
