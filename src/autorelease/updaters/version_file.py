"""Plain VERSION file update used by monorepo packages."""

from __future__ import annotations

from autorelease.updaters.base import Update


class VersionFileUpdate(Update):
    """Replace a ``VERSION`` file holding only the version."""

    create = True

    def update_content(self, content: str) -> str:
        return f"{self.version}\n"
