"""Semantic version parsing, bumping and comparison.

Implements `SemVer 2.0.0 <https://semver.org/spec/v2.0.0.html>`_:

    MAJOR.MINOR.PATCH[-prerelease][+build]

An optional leading ``v`` is accepted on input and never emitted.
Build metadata is carried through parsing and rendering but ignored
by every comparison.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import total_ordering

from lgtm_ci.exceptions import InvalidBumpError, InvalidVersionError

_NUMERIC = r"0|[1-9]\d*"
_IDENTIFIER = r"[0-9A-Za-z-]+"

SEMVER_PATTERN: re.Pattern[str] = re.compile(
    rf"^v?(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?"
    rf"(?:\+(?P<build>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?$"
)


class BumpType(str, Enum):
    """Magnitude of a version increase, ordered NONE < PATCH < MINOR < MAJOR."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _BUMP_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank >= other.rank


_BUMP_ORDER: tuple[BumpType, ...] = (
    BumpType.NONE,
    BumpType.PATCH,
    BumpType.MINOR,
    BumpType.MAJOR,
)


def max_bump(a: BumpType, b: BumpType) -> BumpType:
    """Return the larger of two bump types.

    >>> max_bump(BumpType.PATCH, BumpType.MINOR)
    <BumpType.MINOR: 'minor'>
    """
    return a if a >= b else b


def clamp_bump(bump: BumpType, maximum: BumpType) -> BumpType:
    """Cap a computed bump at an operator-configured ceiling.

    Never raises: a bump already at or below the ceiling is returned
    unchanged.

    >>> clamp_bump(BumpType.MAJOR, BumpType.MINOR)
    <BumpType.MINOR: 'minor'>
    >>> clamp_bump(BumpType.PATCH, BumpType.MINOR)
    <BumpType.PATCH: 'patch'>
    """
    return bump if bump <= maximum else maximum


class Ordering(Enum):
    """Result of comparing two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def _compare_identifier(a: str, b: str) -> int:
    a_numeric = a.isdigit()
    b_numeric = b.isdigit()
    if a_numeric and b_numeric:
        return (int(a) > int(b)) - (int(a) < int(b))
    # Numeric identifiers always have lower precedence than alphanumeric ones.
    if a_numeric:
        return -1
    if b_numeric:
        return 1
    return (a > b) - (a < b)


def _compare_prerelease(a: str | None, b: str | None) -> int:
    if a == b:
        return 0
    # A release has higher precedence than any prerelease of the same core.
    if a is None:
        return 1
    if b is None:
        return -1

    a_ids = a.split(".")
    b_ids = b.split(".")
    for a_id, b_id in zip(a_ids, b_ids, strict=False):
        result = _compare_identifier(a_id, b_id)
        if result:
            return result
    return (len(a_ids) > len(b_ids)) - (len(a_ids) < len(b_ids))


@total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version.

    Equality and ordering follow SemVer precedence, so two versions that
    differ only in build metadata compare equal.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot-separated prerelease identifiers, e.g. ``"rc.1"``.
        build: Dot-separated build metadata, e.g. ``"sha.abc1234"``.
    """

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise InvalidVersionError(f"{self.major}.{self.minor}.{self.patch}")

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string.

        Args:
            text: Version such as ``"1.2.3"``, ``"v2.0.0-rc.1"`` or
                ``"1.0.0+build.5"``.

        Returns:
            The parsed Version.

        Raises:
            InvalidVersionError: If ``text`` is not valid SemVer.
        """
        match = SEMVER_PATTERN.match(text.strip())
        if not match:
            raise InvalidVersionError(text)
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=match.group("prerelease"),
            build=match.group("build"),
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def tag(self, prefix: str = "v") -> str:
        """Return the git tag name for this version, without build metadata."""
        name = f"{prefix}{self.major}.{self.minor}.{self.patch}"
        return f"{name}-{self.prerelease}" if self.prerelease else name

    def bump(self, bump_type: BumpType) -> Version:
        """Return the next version for a bump type.

        Prerelease and build metadata are dropped from the result.

        Raises:
            InvalidBumpError: If ``bump_type`` is ``BumpType.NONE``.
        """
        if bump_type == BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if bump_type == BumpType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        raise InvalidBumpError(
            f"Invalid bump type: {bump_type} (expected: major, minor, patch)"
        )

    def with_prerelease(self, label: str) -> Version:
        """Return a copy carrying the given prerelease label."""
        candidate = f"{self.major}.{self.minor}.{self.patch}-{label}"
        if not SEMVER_PATTERN.match(candidate):
            raise InvalidVersionError(candidate)
        return replace(self, prerelease=label, build=None)

    def compare(self, other: Version) -> Ordering:
        """Compare by SemVer precedence, ignoring build metadata."""
        if self.core != other.core:
            return Ordering.LESS if self.core < other.core else Ordering.GREATER
        return Ordering(_compare_prerelease(self.prerelease, other.prerelease))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) is Ordering.EQUAL

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) is Ordering.LESS

    def __hash__(self) -> int:
        return hash((self.core, self.prerelease))


def parse_version(text: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(text)


def is_valid_version(text: str) -> bool:
    """Return whether ``text`` is a valid SemVer string (``v`` allowed)."""
    return SEMVER_PATTERN.match(text.strip()) is not None


def compare_versions(a: Version, b: Version) -> Ordering:
    """Compare two versions by SemVer precedence."""
    return a.compare(b)


__all__ = [
    "SEMVER_PATTERN",
    "BumpType",
    "Ordering",
    "Version",
    "clamp_bump",
    "compare_versions",
    "is_valid_version",
    "max_bump",
    "parse_version",
]
