"""Partitioning of commits across the packages of a monorepo."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

from autorelease.vcs.models import Commit


class PackageKeyConvention(str, Enum):
    """How a changed file path maps to a package key.

    ``FIRST_SEGMENT``
        The first path segment, e.g. ``Storage/src/Client.php`` belongs to
        ``Storage``. Files at the repository root belong to no package.
    ``MARKER``
        Everything before a marker segment, e.g. ``src/Storage/vendor/x.php``
        with marker ``vendor`` belongs to ``src/Storage``. Paths without the
        marker belong to no package.
    """

    FIRST_SEGMENT = "first-segment"
    MARKER = "marker"


class CommitSplit:
    """Split commits into per-package buckets by the files they touched.

    Args:
        convention: Rule deriving a package key from a path
        paths: Explicit package directories; when given, only these are
            packages and the longest matching prefix wins
        marker: Marker segment used by ``PackageKeyConvention.MARKER``
    """

    def __init__(
        self,
        convention: PackageKeyConvention | str = PackageKeyConvention.FIRST_SEGMENT,
        paths: Iterable[str] = (),
        marker: str = "vendor",
    ) -> None:
        self.convention = PackageKeyConvention(convention)
        self.paths = sorted({p.strip("/") for p in paths if p.strip("/")}, key=len, reverse=True)
        self.marker = marker

    def package_key(self, path: str) -> str | None:
        """Return the package a file path belongs to, or ``None``."""
        path = path.lstrip("/")
        if self.paths:
            for prefix in self.paths:
                if path == prefix or path.startswith(prefix + "/"):
                    return prefix
            return None

        segments = path.split("/")
        if self.convention == PackageKeyConvention.MARKER:
            if self.marker not in segments[:-1]:
                return None
            index = segments.index(self.marker)
            return "/".join(segments[:index]) or None

        if len(segments) < 2 or not segments[0]:
            return None
        return segments[0]

    def package_keys(self, commit: Commit) -> list[str]:
        """Return the packages a commit touched, in first-touched order."""
        keys: list[str] = []
        for path in commit.files:
            key = self.package_key(path)
            if key is not None and key not in keys:
                keys.append(key)
        return keys

    def split(self, commits: Sequence[Commit]) -> dict[str, list[Commit]]:
        """Partition commits into packages.

        A commit touching several packages is placed in each of their
        buckets; a commit touching none is left out. Order within a bucket
        follows the input order, and keys are sorted.
        """
        buckets: dict[str, list[Commit]] = {}
        for commit in commits:
            for key in self.package_keys(commit):
                buckets.setdefault(key, []).append(commit)
        return {key: buckets[key] for key in sorted(buckets)}

    def unassigned(self, commits: Sequence[Commit]) -> list[Commit]:
        """Return the commits that touched no package."""
        return [c for c in commits if not self.package_keys(c)]
