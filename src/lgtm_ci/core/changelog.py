"""Changelog generation from analyzed commits.

Renders grouped commits as Markdown and inserts new version sections
into an existing CHANGELOG.md. Rendering is pure: the same sections,
version and date always produce the same text.
"""

from __future__ import annotations

import os
import tempfile
from datetime import UTC, date, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from lgtm_ci.core.analyze import SectionKind
from lgtm_ci.exceptions import ChangelogError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lgtm_ci.core.analyze import ChangelogSection, CommitAnalysis
    from lgtm_ci.core.commits import ParsedCommit
    from lgtm_ci.core.version import Version


class ChangelogFormat(str, Enum):
    """Entry layout used when rendering a changelog."""

    FULL = "full"
    SIMPLE = "simple"
    WITH_TYPE = "with-type"

    def __str__(self) -> str:
        return self.value


CHANGELOG_HEADER = """\
# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).
"""

VERSION_HEADING_PREFIX = "## ["


def today() -> str:
    """Return today's UTC date as ``YYYY-MM-DD``."""
    return datetime.now(UTC).strftime("%Y-%m-%d")


def format_commit_entry(
    commit: ParsedCommit,
    fmt: ChangelogFormat = ChangelogFormat.FULL,
) -> str:
    """Format a single commit as a Markdown list item.

    Args:
        commit: Commit to format.
        fmt: ``full`` gives ``- **scope**: description (abc1234)``,
            ``simple`` gives ``- description`` and ``with-type`` gives
            ``- type(scope): description``.

    Returns:
        The list item, without a trailing newline.
    """
    if fmt is ChangelogFormat.SIMPLE:
        return f"- {commit.description}"
    if fmt is ChangelogFormat.WITH_TYPE:
        scope = f"({commit.scope})" if commit.scope else ""
        return f"- {commit.type}{scope}: {commit.description}"
    if commit.scope:
        return f"- **{commit.scope}**: {commit.description} ({commit.short_sha})"
    return f"- {commit.description} ({commit.short_sha})"


def render_section(
    section: ChangelogSection,
    fmt: ChangelogFormat = ChangelogFormat.FULL,
) -> list[str]:
    """Render one section as lines; empty sections render nothing."""
    if not section.entries:
        return []
    return [
        f"### {section.title}",
        "",
        *(format_commit_entry(commit, fmt) for commit in section.entries),
        "",
    ]


def render_changelog(
    sections: Iterable[ChangelogSection],
    version: Version | str | None = None,
    release_date: date | str | None = None,
    fmt: ChangelogFormat = ChangelogFormat.FULL,
) -> str:
    """Render grouped commits as a changelog section.

    Args:
        sections: Sections in display order, as produced by the analyzer.
        version: Version for the heading; ``None`` renders ``## Unreleased``.
        release_date: Date for the heading. Defaults to today (UTC).
        fmt: Entry format. The Other Changes section only appears in
            ``full`` format.

    Returns:
        Markdown text ending with a newline.
    """
    if version is None:
        lines = ["## Unreleased", ""]
    else:
        if release_date is None:
            release_date = today()
        elif isinstance(release_date, date):
            release_date = release_date.strftime("%Y-%m-%d")
        lines = [f"## [{version}] - {release_date}", ""]

    # Breaking changes always lead, whatever order the caller passed.
    ordered = sorted(sections, key=lambda s: list(SectionKind).index(s.kind))
    for section in ordered:
        if section.kind is SectionKind.OTHER and fmt is not ChangelogFormat.FULL:
            continue
        lines.extend(render_section(section, fmt))

    return "\n".join(lines).rstrip("\n") + "\n"


def render_release_notes(
    analysis: CommitAnalysis,
    version: Version | str | None = None,
    release_date: date | str | None = None,
) -> str:
    """Render concise release notes: a summary line plus a simple changelog."""
    counts = analysis.counts
    parts = []
    if counts.get("breaking"):
        parts.append(f"{counts['breaking']} breaking change(s)")
    if counts.get("features"):
        parts.append(f"{counts['features']} feature(s)")
    if counts.get("fixes"):
        parts.append(f"{counts['fixes']} fix(es)")
    if counts.get("docs"):
        parts.append(f"{counts['docs']} documentation update(s)")

    body = render_changelog(analysis.sections, version, release_date, ChangelogFormat.SIMPLE)
    if not parts:
        return body
    return f"This release includes: {', '.join(parts)}\n\n{body}"


def insert_changelog_section(existing: str, new_content: str) -> str:
    """Insert a new version section into existing changelog text.

    The section goes immediately before the first ``## [`` heading. If
    the text starts with such a heading the section is prepended; if it
    has none the section is appended.
    """
    new_content = new_content.rstrip("\n")
    lines = existing.splitlines(keepends=True)

    for index, line in enumerate(lines):
        if not line.startswith(VERSION_HEADING_PREFIX):
            continue
        if index == 0:
            return f"{new_content}\n\n{existing}"
        head = "".join(lines[:index])
        tail = "".join(lines[index:])
        if not head.endswith("\n\n"):
            head = head.rstrip("\n") + "\n\n"
        return f"{head}{new_content}\n\n{tail}"

    body = existing.rstrip("\n")
    if not body:
        return f"{new_content}\n"
    return f"{body}\n\n{new_content}\n"


def update_changelog_file(path: Path, new_content: str) -> Path:
    """Write a new version section into a changelog file.

    A missing file is created with a Keep a Changelog header. An existing
    file is rewritten atomically and keeps its permissions.

    Raises:
        ChangelogError: If the file cannot be read or written.
    """
    path = Path(path)
    try:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            content = new_content.rstrip("\n")
            path.write_text(f"{CHANGELOG_HEADER}\n{content}\n")
            return path

        updated = insert_changelog_section(path.read_text(), new_content)
        mode = path.stat().st_mode & 0o7777
        fd, tmp_name = tempfile.mkstemp(prefix=".changelog.", dir=path.parent)
        try:
            with os.fdopen(fd, "w") as tmp:
                tmp.write(updated)
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ChangelogError(f"Could not update {path}: {e}") from e
    return path


def compare_url(repo: str, from_tag: str, to_tag: str) -> str | None:
    """Return the GitHub compare URL between two tags, if all parts are known."""
    if not (repo and from_tag and to_tag):
        return None
    return f"https://github.com/{repo}/compare/{from_tag}...{to_tag}"


__all__ = [
    "CHANGELOG_HEADER",
    "ChangelogFormat",
    "compare_url",
    "format_commit_entry",
    "insert_changelog_section",
    "render_changelog",
    "render_release_notes",
    "render_section",
    "today",
    "update_changelog_file",
]
