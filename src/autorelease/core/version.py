"""Semantic version parsing and incrementing.

Versions are :class:`semver.Version` objects; tags and manifests may carry a
leading ``v``, which is dropped on parsing.
"""

from __future__ import annotations

from enum import Enum

import semver

from autorelease.exceptions import InvalidVersionError, VersionIncrementError


class BumpType(str, Enum):
    """Semantic version component to increment.

    ``NONE`` means no release is warranted.
    """

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class Version(semver.Version):
    """A semantic version (major.minor.patch[-prerelease][+build]).

    Ordering follows semver precedence, so ``2.0.0-rc.2 < 2.0.0-rc.10 < 2.0.0``.
    """

    @classmethod
    def parse(cls, version: str | bytes, optional_minor_and_patch: bool = False) -> Version:
        """Parse a version string, accepting a leading ``v``.

        Raises:
            InvalidVersionError: If the string is not a semantic version
        """
        if isinstance(version, bytes):
            version = version.decode("utf-8")
        text = version.strip()
        if text.startswith("v"):
            text = text[1:]
        try:
            return super().parse(text, optional_minor_and_patch)
        except (TypeError, ValueError) as e:
            raise InvalidVersionError(f"Invalid semantic version: {version!r}") from e

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def bump(self, bump_type: BumpType) -> Version:
        """Return the next version for ``bump_type``.

        A pre-release of the target version is promoted rather than skipped,
        e.g. ``2.0.0-rc.1`` bumped by ``major`` gives ``2.0.0``.

        Raises:
            VersionIncrementError: If ``bump_type`` is ``NONE``
        """
        if bump_type == BumpType.NONE:
            raise VersionIncrementError(f"Cannot increment {self} with bump type {bump_type}")
        return self.next_version(bump_type.value)


def parse_version(value: str) -> Version:
    """Parse a version string. Shorthand for :meth:`Version.parse`."""
    return Version.parse(value)


def increment_version(value: str, bump_type: BumpType) -> str:
    """Increment a version string, raising on undefined increments.

    Raises:
        VersionIncrementError: If ``value`` is not a semantic version or
            ``bump_type`` is ``NONE``
    """
    try:
        version = Version.parse(value)
    except InvalidVersionError as e:
        raise VersionIncrementError(f"Failed to increment {value!r}: {e}") from e
    return str(version.bump(bump_type))
