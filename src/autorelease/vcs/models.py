"""Records exchanged with the repository host."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Commit:
    """A commit as fetched from the host.

    Attributes:
        sha: Full commit SHA
        message: Full commit message (header and body)
        files: Paths changed by the commit, in host order
    """

    sha: str
    message: str
    files: tuple[str, ...] = ()

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True, slots=True)
class Tag:
    """A release tag and the version it names."""

    name: str
    sha: str
    version: str


@dataclass(frozen=True, slots=True)
class ReleasePullRequest:
    """A pull request carrying the release tracking labels."""

    number: int
    sha: str
    version: str
    labels: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class FileContents:
    """Decoded file contents plus the blob SHA needed to update them."""

    path: str
    parsed_content: str
    sha: str | None = None
