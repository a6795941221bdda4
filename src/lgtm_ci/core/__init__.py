"""Core release logic for lgtm-ci.

This module contains the fundamental building blocks:
- Semantic version parsing, bumping and comparison
- Conventional commit parsing
- Commit range analysis
- Changelog rendering
- Release orchestration
"""

from __future__ import annotations

from lgtm_ci.core.analyze import (
    ChangelogSection,
    CommitAnalysis,
    SectionKind,
    analyze_commits,
    analyze_range,
    calculate_bump,
    count_commits,
    group_commits,
)
from lgtm_ci.core.changelog import (
    ChangelogFormat,
    render_changelog,
    render_release_notes,
    update_changelog_file,
)
from lgtm_ci.core.commits import (
    ParsedCommit,
    classify_commit,
    is_breaking_change,
    parse_conventional_commit,
)
from lgtm_ci.core.release import ReleasePlan, ReleaseState, plan_release
from lgtm_ci.core.version import (
    BumpType,
    Ordering,
    Version,
    clamp_bump,
    compare_versions,
    parse_version,
)

__all__ = [
    # Version
    "BumpType",
    # Changelog
    "ChangelogFormat",
    "ChangelogSection",
    # Analysis
    "CommitAnalysis",
    "Ordering",
    # Commits
    "ParsedCommit",
    # Release
    "ReleasePlan",
    "ReleaseState",
    "SectionKind",
    "Version",
    "analyze_commits",
    "analyze_range",
    "calculate_bump",
    "clamp_bump",
    "classify_commit",
    "compare_versions",
    "count_commits",
    "group_commits",
    "is_breaking_change",
    "parse_conventional_commit",
    "parse_version",
    "plan_release",
    "render_changelog",
    "render_release_notes",
    "update_changelog_file",
]
