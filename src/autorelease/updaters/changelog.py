"""CHANGELOG.md update: prepend the new entry."""

from __future__ import annotations

import re

from autorelease.updaters.base import Update

CHANGELOG_TITLE = "# Changelog"

_TITLE_RE = re.compile(r"^# [^\n]*(?:\n|$)")
_FIRST_RELEASE_RE = re.compile(r"^#{2,3} \[?v?\d", re.MULTILINE)


class ChangelogUpdate(Update):
    """Insert the changelog entry above the previous releases.

    The entry goes right after the document title (``# Changelog`` is
    written when the file is new or has no title).
    """

    create = True

    def update_content(self, content: str) -> str:
        entry = self.changelog_entry.strip("\n")
        if not content.strip():
            return f"{CHANGELOG_TITLE}\n\n{entry}\n"

        release = _FIRST_RELEASE_RE.search(content)
        if release is not None and release.start() > 0:
            head = content[: release.start()].rstrip("\n")
            rest = content[release.start() :]
            return f"{head}\n\n{entry}\n\n{rest}"

        title = _TITLE_RE.match(content)
        if title is not None:
            rest = content[title.end() :].lstrip("\n")
            if not rest:
                return f"{title.group(0).rstrip()}\n\n{entry}\n"
            return f"{title.group(0).rstrip()}\n\n{entry}\n\n{rest}"

        return f"{CHANGELOG_TITLE}\n\n{entry}\n\n{content.lstrip()}"
