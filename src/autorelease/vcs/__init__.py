"""Repository host access.

The PyGithub-backed adapter lives in :mod:`autorelease.vcs.github` and is
imported explicitly so the release engine does not depend on it.
"""

from __future__ import annotations

from autorelease.vcs.host import RepositoryHost
from autorelease.vcs.models import Commit, FileContents, ReleasePullRequest, Tag

__all__ = [
    "Commit",
    "FileContents",
    "ReleasePullRequest",
    "RepositoryHost",
    "Tag",
]
