"""Exception hierarchy for autorelease.

Every error raised on purpose by autorelease derives from
:class:`AutoreleaseError`, so callers (the CLI, or a batch job releasing
many repositories) can tell an aborted run apart from a programming error.
"""

from __future__ import annotations


class AutoreleaseError(Exception):
    """Base class for all autorelease errors."""


# Configuration


class ConfigError(AutoreleaseError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml was found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


class UnrecognizedReleaseModeError(ConfigError):
    """The configured release type is not implemented."""

    def __init__(self, release_type: str, known: list[str] | None = None) -> None:
        self.release_type = release_type
        message = f"Unrecognized release type: {release_type!r}"
        if known:
            message += f" (expected one of: {', '.join(known)})"
        super().__init__(message)


# Lookups


class NotFoundError(AutoreleaseError):
    """A file or changelog section does not exist."""


# Versions


class VersionError(AutoreleaseError):
    """Base class for version errors."""


class InvalidVersionError(VersionError):
    """A string is not a valid semantic version."""


class VersionIncrementError(VersionError):
    """A version could not be incremented."""


class VersionNotFoundError(VersionError):
    """A manifest does not contain a version to update."""


# Repository host


class HostError(AutoreleaseError):
    """A call to the repository host failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)
