"""Version updates for Python projects.

Formatting and comments are preserved by using targeted regex
replacement rather than parsing and rewriting the files.
"""

from __future__ import annotations

import re

from autorelease.exceptions import VersionNotFoundError
from autorelease.updaters.base import Update

_VERSION_LINE_RE = r'^(version\s*=\s*)["\'][^"\']+["\']'
_DUNDER_VERSION_RE = r'^(__version__\s*=\s*)["\'][^"\']+["\']'


def _replace_in_section(content: str, header: str, new_version: str) -> tuple[str, bool]:
    """Replace ``version = "..."`` inside the TOML table named by ``header``."""

    def replace(match: re.Match[str]) -> str:
        return re.sub(
            _VERSION_LINE_RE,
            rf'\g<1>"{new_version}"',
            match.group(0),
            count=1,
            flags=re.MULTILINE,
        )

    # The table runs up to the next table header or EOF
    pattern = rf"^\[{re.escape(header)}\].*?(?=^\[|\Z)"
    new_content, count = re.subn(
        pattern, replace, content, count=1, flags=re.MULTILINE | re.DOTALL
    )
    return new_content, count > 0 and new_content != content


class PyprojectUpdate(Update):
    """Set ``[project].version`` (PEP 621) or ``[tool.poetry].version``."""

    def update_content(self, content: str) -> str:
        for header in ("project", "tool.poetry"):
            new_content, updated = _replace_in_section(content, header, self.version)
            if updated:
                return new_content

        if re.search(r'^version\s*=\s*["\']' + re.escape(self.version), content, re.MULTILINE):
            # already at the target version
            return content
        raise VersionNotFoundError(
            f"Could not find version to update in {self.path}. "
            "Expected [project].version or [tool.poetry].version."
        )


class PythonVersionFileUpdate(Update):
    """Rewrite ``__version__ = "..."`` in a module such as ``__init__.py``."""

    pattern = _DUNDER_VERSION_RE

    def update_content(self, content: str) -> str:
        new_content, count = re.subn(
            self.pattern,
            rf'\g<1>"{self.version}"',
            content,
            count=1,
            flags=re.MULTILINE,
        )
        if count == 0:
            raise VersionNotFoundError(f"Could not find version pattern in {self.path}")
        return new_content
