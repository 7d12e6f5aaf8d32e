"""Configuration management for autorelease."""

from __future__ import annotations

from autorelease.config.loader import load_config
from autorelease.config.models import (
    AutoreleaseConfig,
    ChangelogConfig,
    GitHubConfig,
    PackagesConfig,
)

__all__ = [
    "AutoreleaseConfig",
    "ChangelogConfig",
    "GitHubConfig",
    "PackagesConfig",
    "load_config",
]
