"""Changelog entry generation and release notes extraction.

Entries are rendered as Markdown::

    ## 1.2.4 (2024-01-01)

    ### Bug Fixes

    * **api:** handle null response (abc1234)

An entry with no qualifying commits is just its heading line; callers
treat such an entry as "no user facing changes" (see :func:`changelog_empty`).
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable, Sequence
from datetime import UTC, date, datetime

from autorelease.core.commits import ClassifiedCommit, CommitType
from autorelease.exceptions import NotFoundError

BREAKING_CHANGES = "Breaking Changes"
FEATURES = "Features"
BUG_FIXES = "Bug Fixes"
PERFORMANCE = "Performance"
OTHER = "Other"

SECTION_ORDER = (BREAKING_CHANGES, FEATURES, BUG_FIXES, PERFORMANCE, OTHER)

_SECTION_TYPES = {
    CommitType.FEAT: FEATURES,
    CommitType.FIX: BUG_FIXES,
    CommitType.PERF: PERFORMANCE,
}

# "### 1." or "### [1." starts an older release written with a level-3 heading
_OLD_RELEASE_HEADING_RE = re.compile(r"^###\s\[?\d+\.")
_VERSION_CHAR_RE = re.compile(r"[0-9A-Za-z.+-]")


def format_commit_for_changelog(commit: ClassifiedCommit, repo_url: str | None = None) -> str:
    """Format a commit as a changelog bullet.

    Args:
        commit: Classified commit
        repo_url: Repository URL; when given the short SHA links to the commit

    Returns:
        Bullet line, e.g. ``* **api:** handle null response (abc1234)``
    """
    scope = f"**{commit.scope}:** " if commit.scope else ""
    line = f"* {scope}{commit.description}"
    if commit.sha:
        ref = commit.short_sha
        if repo_url:
            ref = f"[{ref}]({repo_url.rstrip('/')}/commit/{commit.sha})"
        line += f" ({ref})"
    return line


def group_into_sections(
    commits: Iterable[ClassifiedCommit],
    other_types: Collection[CommitType | str] = (),
) -> dict[str, list[ClassifiedCommit]]:
    """Sort commits into changelog sections.

    Breaking changes are listed only under "Breaking Changes". Commits whose
    type is in ``other_types`` go to "Other"; anything else that is not a
    feature, fix or performance improvement is left out.

    Returns:
        Non-empty sections, in :data:`SECTION_ORDER`
    """
    other = {CommitType(t) for t in other_types}
    sections: dict[str, list[ClassifiedCommit]] = {name: [] for name in SECTION_ORDER}
    for commit in commits:
        if not commit.is_conventional:
            continue
        if commit.breaking:
            sections[BREAKING_CHANGES].append(commit)
        elif commit.type in _SECTION_TYPES:
            sections[_SECTION_TYPES[commit.type]].append(commit)
        elif commit.type in other:
            sections[OTHER].append(commit)
    return {name: items for name, items in sections.items() if items}


def render_sections(
    sections: dict[str, list[ClassifiedCommit]],
    *,
    heading_level: int = 3,
    repo_url: str | None = None,
) -> list[str]:
    lines: list[str] = []
    for name in SECTION_ORDER:
        items = sections.get(name)
        if not items:
            continue
        lines.append("")
        lines.append(f"{'#' * heading_level} {name}")
        lines.append("")
        lines.extend(format_commit_for_changelog(c, repo_url) for c in items)
    return lines


def _format_date(when: date | None) -> str:
    if when is None:
        when = datetime.now(UTC).date()
    return when.strftime("%Y-%m-%d")


def generate_changelog_entry(
    version: str,
    commits: Sequence[ClassifiedCommit],
    *,
    when: date | None = None,
    repo_url: str | None = None,
    other_types: Collection[CommitType | str] = (),
) -> str:
    """Generate the changelog entry for ``version``.

    Args:
        version: Version being released
        commits: Classified commits since the previous release
        when: Release date (defaults to today, UTC)
        repo_url: Repository URL used to link commit SHAs
        other_types: Commit types listed under "Other"

    Returns:
        Markdown entry; only the heading line when no commit qualifies
    """
    lines = [f"## {version} ({_format_date(when)})"]
    sections = group_into_sections(commits, other_types)
    lines.extend(render_sections(sections, heading_level=3, repo_url=repo_url))
    return "\n".join(lines)


def render_package_section(
    package_key: str,
    version: str,
    commits: Sequence[ClassifiedCommit],
    *,
    repo_url: str | None = None,
    other_types: Collection[CommitType | str] = (),
) -> str:
    """Render one package's block for a monorepo release entry.

    Package blocks use a level-3 heading so the combined entry stays a single
    release section when notes are extracted later.
    """
    lines = [f"### {package_key} {version}"]
    sections = group_into_sections(commits, other_types)
    lines.extend(render_sections(sections, heading_level=4, repo_url=repo_url))
    return "\n".join(lines)


def changelog_empty(entry: str) -> bool:
    """Whether an entry consists of its heading line only."""
    return len(entry.strip("\n").split("\n")) == 1


def _normalize_version(version: str) -> str:
    version = version.strip()
    return version[1:] if version.startswith("v") else version


def _is_release_heading(line: str, version: str) -> bool:
    if not line.startswith("## "):
        return False
    rest = line[3:]
    if rest.startswith("v"):
        rest = rest[1:]
    if rest.startswith("["):
        rest = rest[1:]
    if not rest.startswith(version):
        return False
    tail = rest[len(version) :]
    # "## 1.0.0-beta" is not the heading for 1.0.0
    return not tail or _VERSION_CHAR_RE.match(tail[0]) is None


def _ends_section(line: str) -> bool:
    if line.startswith("##") and len(line) > 2 and line[2] in " \t":
        return True
    return _OLD_RELEASE_HEADING_RE.match(line) is not None


def extract_release_notes(document: str, version: str) -> str:
    """Extract the notes written for ``version`` from a changelog document.

    The section starts after a heading such as ``## 1.2.3 (date)``,
    ``## v1.2.3`` or ``## [1.2.3](link)`` and runs up to the next ``## ``
    heading, the next ``### <digits>.`` release heading, or the end of the
    document.

    Args:
        document: Changelog contents
        version: Version to look up, with or without a leading ``v``

    Returns:
        The section body without its heading or surrounding blank lines

    Raises:
        NotFoundError: If the document has no heading for ``version``
    """
    version = _normalize_version(version)
    lines = document.replace("\r\n", "\n").split("\n")

    start: int | None = None
    for index, line in enumerate(lines):
        if _is_release_heading(line, version):
            start = index + 1
            break
    if start is None:
        raise NotFoundError(f"Could not find changelog entry for version {version}")

    collected: list[str] = []
    for line in lines[start:]:
        if _ends_section(line):
            break
        collected.append(line.rstrip())
    return "\n".join(collected).strip("\n")
