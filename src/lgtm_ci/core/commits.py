"""Conventional commit parsing.

Classifies commit subjects following the Conventional Commits format::

    type(scope)!: description

Everything in this module is pure: no git access, no logging.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lgtm_ci.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lgtm_ci.vcs.git import Commit

# Matches: type(scope)!: description, type!: description, type: description
CC_PATTERN: re.Pattern[str] = re.compile(
    r"^(?P<type>[a-z]+)"
    r"(?:\((?P<scope>[^)]+)\))?"
    r"(?P<breaking>!)?"
    r": (?P<description>.+)$"
)

BREAKING_BANG_PATTERN: re.Pattern[str] = re.compile(r"^[a-z]+(?:\([^)]+\))?!:")
BREAKING_MARKER = "BREAKING CHANGE"

OTHER_TYPE = "other"

DEFAULT_FEATURE_TYPES: frozenset[str] = frozenset({"feat", "feature"})
DEFAULT_FIX_TYPES: frozenset[str] = frozenset({"fix", "bugfix", "hotfix"})
DEFAULT_DOCS_TYPES: frozenset[str] = frozenset({"docs", "documentation"})
DEFAULT_MISC_TYPES: frozenset[str] = frozenset(
    {"style", "refactor", "perf", "test", "build", "ci", "chore", "revert"}
)
DEFAULT_ALLOWED_TYPES: frozenset[str] = (
    DEFAULT_FEATURE_TYPES | DEFAULT_FIX_TYPES | DEFAULT_DOCS_TYPES | DEFAULT_MISC_TYPES
)

DEFAULT_SKIP_RELEASE_PATTERNS: tuple[str, ...] = (
    "[skip release]",
    "[release skip]",
    "[no release]",
)


@dataclass(frozen=True)
class ParsedCommit:
    """A commit classified by its subject line.

    Commits whose subject does not follow the convention are kept with
    ``type="other"`` and the whole subject as description.

    Attributes:
        sha: Full commit SHA.
        type: Conventional type (``feat``, ``fix``, ...) or ``"other"``.
        scope: Scope without parentheses, if any.
        breaking: Whether the commit is a breaking change.
        description: Subject text after ``type(scope)!: ``.
        is_conventional: Whether the subject matched the convention.
    """

    sha: str
    type: str
    description: str
    scope: str | None = None
    breaking: bool = False
    is_conventional: bool = True

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @classmethod
    def from_commit(cls, commit: Commit) -> ParsedCommit:
        """Classify a commit, falling back to ``type="other"``."""
        return classify_commit(commit.sha, commit.subject, commit.message)


def is_breaking_change(message: str) -> bool:
    """Check whether a commit message signals a breaking change.

    Either a ``!`` before the colon of the subject, or the literal
    ``BREAKING CHANGE`` anywhere in the message.

    >>> is_breaking_change("feat(api)!: drop v1")
    True
    >>> is_breaking_change("fix: typo\\n\\nBREAKING CHANGE: config key renamed")
    True
    """
    if BREAKING_BANG_PATTERN.match(message):
        return True
    return BREAKING_MARKER in message


def parse_conventional_commit(
    subject: str,
    message: str = "",
    sha: str = "",
) -> ParsedCommit | None:
    """Parse a commit subject as a conventional commit.

    Args:
        subject: The commit subject line.
        message: The full commit message, searched for ``BREAKING CHANGE``.
        sha: The commit SHA.

    Returns:
        A ParsedCommit, or None if the subject does not match.
    """
    match = CC_PATTERN.match(subject)
    if not match:
        return None

    breaking = bool(match.group("breaking")) or BREAKING_MARKER in message
    return ParsedCommit(
        sha=sha,
        type=match.group("type"),
        scope=match.group("scope"),
        breaking=breaking,
        description=match.group("description"),
    )


def classify_commit(sha: str, subject: str, message: str = "") -> ParsedCommit:
    """Parse a commit, treating unparsed subjects as ``type="other"``.

    An unparsed commit is still breaking when its message carries the
    ``BREAKING CHANGE`` marker.
    """
    parsed = parse_conventional_commit(subject, message, sha)
    if parsed is not None:
        return parsed
    return ParsedCommit(
        sha=sha,
        type=OTHER_TYPE,
        description=subject,
        breaking=BREAKING_MARKER in message,
        is_conventional=False,
    )


def parse_commits(commits: Iterable[Commit]) -> list[ParsedCommit]:
    """Classify commits, preserving their order."""
    return [ParsedCommit.from_commit(commit) for commit in commits]


def bump_for_type(
    commit_type: str,
    feature_types: Iterable[str] = DEFAULT_FEATURE_TYPES,
    fix_types: Iterable[str] = DEFAULT_FIX_TYPES,
) -> BumpType:
    """Map a commit type to the bump it implies on its own.

    >>> bump_for_type("feat")
    <BumpType.MINOR: 'minor'>
    >>> bump_for_type("chore")
    <BumpType.NONE: 'none'>
    """
    if commit_type in feature_types:
        return BumpType.MINOR
    if commit_type in fix_types:
        return BumpType.PATCH
    return BumpType.NONE


def filter_skip_release_commits(
    commits: list[Commit],
    patterns: Iterable[str],
) -> list[Commit]:
    """Drop commits whose message contains a skip-release marker.

    Markers are matched case-insensitively anywhere in the message.
    """
    markers = [pattern.lower() for pattern in patterns if pattern]
    if not markers:
        return list(commits)
    return [
        commit
        for commit in commits
        if not any(marker in commit.message.lower() for marker in markers)
    ]


# =============================================================================
# PR title validation
# =============================================================================

PR_TITLE_PATTERN: re.Pattern[str] = re.compile(
    r"^(?P<type>[A-Za-z]+)"
    r"(?:\((?P<scope>[^)]+)\))?"
    r"(?P<breaking>!)?"
    r":\s+(?P<description>\S.*)$"
)


@dataclass(frozen=True)
class PrTitleValidation:
    """Outcome of validating a pull request title."""

    title: str
    is_valid: bool
    error: str | None = None
    commit_type: str | None = None
    scope: str | None = None
    description: str | None = None
    is_breaking: bool = False


def validate_pr_title(
    title: str,
    *,
    allowed_types: frozenset[str] = DEFAULT_ALLOWED_TYPES,
    require_scope: bool = False,
    max_length: int = 72,
) -> PrTitleValidation:
    """Validate a pull request title against the conventional format.

    Squash merges use the PR title as the commit subject, so this is
    the same grammar the release analysis relies on. Types are matched
    case-insensitively and normalised to lowercase.
    """
    stripped = title.strip()
    if not stripped:
        return PrTitleValidation(title=title, is_valid=False, error="PR title cannot be empty")

    if len(stripped) > max_length:
        return PrTitleValidation(
            title=title,
            is_valid=False,
            error=f"PR title exceeds {max_length} characters ({len(stripped)})",
        )

    match = PR_TITLE_PATTERN.match(stripped)
    if not match:
        return PrTitleValidation(
            title=title,
            is_valid=False,
            error="PR title must follow conventional commit format: type(scope): description",
        )

    commit_type = match.group("type").lower()
    scope = match.group("scope")
    if commit_type not in allowed_types:
        allowed = ", ".join(sorted(allowed_types))
        return PrTitleValidation(
            title=title,
            is_valid=False,
            error=f"Invalid commit type '{commit_type}'. Allowed types: {allowed}",
            commit_type=commit_type,
        )

    if require_scope and not scope:
        return PrTitleValidation(
            title=title,
            is_valid=False,
            error="PR title must include a scope, e.g. feat(api): description",
            commit_type=commit_type,
        )

    return PrTitleValidation(
        title=title,
        is_valid=True,
        commit_type=commit_type,
        scope=scope,
        description=match.group("description").strip(),
        is_breaking=bool(match.group("breaking")),
    )


__all__ = [
    "BREAKING_MARKER",
    "CC_PATTERN",
    "DEFAULT_ALLOWED_TYPES",
    "DEFAULT_DOCS_TYPES",
    "DEFAULT_FEATURE_TYPES",
    "DEFAULT_FIX_TYPES",
    "DEFAULT_SKIP_RELEASE_PATTERNS",
    "OTHER_TYPE",
    "ParsedCommit",
    "PrTitleValidation",
    "bump_for_type",
    "classify_commit",
    "filter_skip_release_commits",
    "is_breaking_change",
    "parse_commits",
    "parse_conventional_commit",
    "validate_pr_title",
]
