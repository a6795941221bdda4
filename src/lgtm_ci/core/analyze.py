"""Commit range analysis.

Walks a git log range, classifies each commit and reduces the result
to a single bump type, a grouped view for changelogs, and per-category
counts for reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from lgtm_ci.core.commits import (
    DEFAULT_DOCS_TYPES,
    DEFAULT_FEATURE_TYPES,
    DEFAULT_FIX_TYPES,
    ParsedCommit,
    filter_skip_release_commits,
    parse_commits,
)
from lgtm_ci.core.version import BumpType
from lgtm_ci.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lgtm_ci.config.models import CommitsConfig
    from lgtm_ci.vcs.git import GitRepository

log = get_logger(__name__)


class SectionKind(Enum):
    """Changelog categories, in display order."""

    BREAKING = "breaking"
    FEATURES = "features"
    FIXES = "fixes"
    DOCS = "docs"
    OTHER = "other"

    @property
    def title(self) -> str:
        return _SECTION_TITLES[self]


_SECTION_TITLES: dict[SectionKind, str] = {
    SectionKind.BREAKING: "Breaking Changes",
    SectionKind.FEATURES: "Features",
    SectionKind.FIXES: "Bug Fixes",
    SectionKind.DOCS: "Documentation",
    SectionKind.OTHER: "Other Changes",
}


@dataclass(frozen=True)
class ChangelogSection:
    """One changelog category and its commits, in log order."""

    kind: SectionKind
    entries: tuple[ParsedCommit, ...] = ()

    @property
    def title(self) -> str:
        return self.kind.title


@dataclass(frozen=True)
class TypeFamilies:
    """Commit types grouped by the category they count towards."""

    features: frozenset[str] = DEFAULT_FEATURE_TYPES
    fixes: frozenset[str] = DEFAULT_FIX_TYPES
    docs: frozenset[str] = DEFAULT_DOCS_TYPES

    @classmethod
    def from_config(cls, config: CommitsConfig) -> TypeFamilies:
        return cls(
            features=frozenset(config.feature_types),
            fixes=frozenset(config.fix_types),
            docs=frozenset(config.docs_types),
        )

    def section_for(self, commit: ParsedCommit) -> SectionKind:
        """Return the section a commit is listed under."""
        if commit.breaking:
            return SectionKind.BREAKING
        if commit.type in self.features:
            return SectionKind.FEATURES
        if commit.type in self.fixes:
            return SectionKind.FIXES
        if commit.type in self.docs:
            return SectionKind.DOCS
        return SectionKind.OTHER


DEFAULT_FAMILIES = TypeFamilies()


def calculate_bump(
    commits: Iterable[ParsedCommit],
    families: TypeFamilies = DEFAULT_FAMILIES,
) -> BumpType:
    """Reduce classified commits to the bump they require.

    MAJOR if any commit is breaking, else MINOR if any is a feature,
    else PATCH if any is a fix, else NONE. Non-conventional commits
    never raise the bump on their own.
    """
    bump = BumpType.NONE
    for commit in commits:
        kind = families.section_for(commit)
        if kind is SectionKind.BREAKING:
            return BumpType.MAJOR
        if kind is SectionKind.FEATURES:
            bump = BumpType.MINOR
        elif kind is SectionKind.FIXES and bump < BumpType.PATCH:
            bump = BumpType.PATCH
    return bump


def group_commits(
    commits: Iterable[ParsedCommit],
    families: TypeFamilies = DEFAULT_FAMILIES,
) -> list[ChangelogSection]:
    """Group commits into changelog sections.

    Every section is present (possibly empty) in display order. A
    breaking commit is listed under Breaking Changes only.
    """
    buckets: dict[SectionKind, list[ParsedCommit]] = {kind: [] for kind in SectionKind}
    for commit in commits:
        buckets[families.section_for(commit)].append(commit)
    return [ChangelogSection(kind, tuple(entries)) for kind, entries in buckets.items()]


def count_commits(
    commits: Iterable[ParsedCommit],
    families: TypeFamilies = DEFAULT_FAMILIES,
) -> dict[str, int]:
    """Count commits per section, keyed by section name."""
    counts = {kind.value: 0 for kind in SectionKind}
    for commit in commits:
        counts[families.section_for(commit).value] += 1
    return counts


@dataclass(frozen=True)
class CommitAnalysis:
    """Result of analyzing a commit range.

    Attributes:
        from_ref: Exclusive start of the range; empty for all history.
        to_ref: Inclusive end of the range.
        commits: Classified commits, newest first.
        bump: The bump the range requires.
        sections: Commits grouped by changelog section, in display order.
        counts: Number of commits per section name.
    """

    from_ref: str
    to_ref: str
    commits: tuple[ParsedCommit, ...]
    bump: BumpType
    sections: tuple[ChangelogSection, ...]
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def release_needed(self) -> bool:
        return self.bump != BumpType.NONE

    def section(self, kind: SectionKind) -> ChangelogSection:
        return next(s for s in self.sections if s.kind is kind)


def analyze_commits(
    commits: Iterable[ParsedCommit],
    families: TypeFamilies = DEFAULT_FAMILIES,
    *,
    from_ref: str = "",
    to_ref: str = "HEAD",
) -> CommitAnalysis:
    """Build a CommitAnalysis from already-classified commits."""
    commits = tuple(commits)
    return CommitAnalysis(
        from_ref=from_ref,
        to_ref=to_ref,
        commits=commits,
        bump=calculate_bump(commits, families),
        sections=tuple(group_commits(commits, families)),
        counts=count_commits(commits, families),
    )


def analyze_range(
    repo: GitRepository,
    from_ref: str = "",
    to_ref: str = "HEAD",
    config: CommitsConfig | None = None,
) -> CommitAnalysis:
    """Analyze the commits in ``from_ref..to_ref``.

    Args:
        repo: Repository to read history from.
        from_ref: Exclusive start; empty means the beginning of history.
        to_ref: Inclusive end.
        config: Type families and skip-release markers. Defaults apply
            when omitted.

    Returns:
        The analysis of the range.

    Raises:
        RefNotFoundError: If ``from_ref`` is non-empty and does not resolve.
    """
    commits = repo.get_commits(from_ref, to_ref)
    families = DEFAULT_FAMILIES
    if config is not None:
        families = TypeFamilies.from_config(config)
        kept = filter_skip_release_commits(commits, config.skip_release_patterns)
        if len(kept) != len(commits):
            log.info("skipped commits with skip-release markers", count=len(commits) - len(kept))
        commits = kept

    analysis = analyze_commits(
        parse_commits(commits), families, from_ref=from_ref, to_ref=to_ref
    )
    log.debug(
        "analyzed commit range",
        from_ref=from_ref or None,
        to_ref=to_ref,
        commits=len(analysis.commits),
        bump=str(analysis.bump),
    )
    return analysis


def has_releasable_commits(
    repo: GitRepository,
    from_ref: str = "",
    to_ref: str = "HEAD",
    config: CommitsConfig | None = None,
) -> bool:
    return analyze_range(repo, from_ref, to_ref, config).release_needed


__all__ = [
    "ChangelogSection",
    "CommitAnalysis",
    "SectionKind",
    "TypeFamilies",
    "analyze_commits",
    "analyze_range",
    "calculate_bump",
    "count_commits",
    "group_commits",
    "has_releasable_commits",
]
