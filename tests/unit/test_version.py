"""Tests for semantic version handling."""

from __future__ import annotations

import pytest

from lgtm_ci.core.version import (
    BumpType,
    Ordering,
    Version,
    clamp_bump,
    compare_versions,
    is_valid_version,
    max_bump,
    parse_version,
)
from lgtm_ci.exceptions import InvalidBumpError, InvalidVersionError, LgtmCiError


class TestVersionParse:
    """Tests for Version.parse()."""

    def test_parse_simple(self):
        """Parse a plain X.Y.Z version."""
        v = Version.parse("1.2.3")

        assert (v.major, v.minor, v.patch) == (1, 2, 3)
        assert v.prerelease is None
        assert v.build is None

    def test_parse_strips_v_prefix(self):
        """A leading v is accepted and not rendered."""
        assert str(Version.parse("v2.0.0")) == "2.0.0"

    def test_parse_prerelease_and_build(self):
        """Parse prerelease identifiers and build metadata."""
        v = Version.parse("1.0.0-rc.1+build.42")

        assert v.prerelease == "rc.1"
        assert v.build == "build.42"
        assert v.is_prerelease

    @pytest.mark.parametrize(
        "text",
        ["1.2", "1.2.3.4", "01.2.3", "1.02.3", "1.2.3-", "1.2.3-rc..1", "latest", "", "V1.2.3"],
    )
    def test_parse_invalid(self, text: str):
        """Reject anything that is not strict SemVer."""
        with pytest.raises(InvalidVersionError):
            Version.parse(text)

    def test_invalid_version_is_lgtm_ci_error(self):
        """InvalidVersionError is part of the tool's error hierarchy."""
        with pytest.raises(LgtmCiError, match="Invalid version"):
            parse_version("not-a-version")

    @pytest.mark.parametrize("text", ["0.0.0", "1.2.3-alpha", "1.2.3+sha.abc", "10.20.30-x.7.z.92"])
    def test_round_trip(self, text: str):
        """Rendering a parsed version reproduces the input."""
        assert str(Version.parse(text)) == text

    def test_is_valid_version(self):
        assert is_valid_version("v1.0.0")
        assert not is_valid_version("1.0")

    def test_negative_component_rejected(self):
        with pytest.raises(InvalidVersionError):
            Version(1, -1, 0)


class TestVersionBump:
    """Tests for Version.bump()."""

    @pytest.mark.parametrize(
        ("bump", "expected"),
        [
            (BumpType.MAJOR, "2.0.0"),
            (BumpType.MINOR, "1.3.0"),
            (BumpType.PATCH, "1.2.4"),
        ],
    )
    def test_bump(self, bump: BumpType, expected: str):
        assert str(Version.parse("1.2.3").bump(bump)) == expected

    def test_bump_drops_prerelease_and_build(self):
        """Bumping always produces a plain release version."""
        v = Version.parse("1.2.3-beta.2+exp.sha.5114f85")

        assert str(v.bump(BumpType.PATCH)) == "1.2.4"

    @pytest.mark.parametrize("text", ["0.0.0", "1.2.3", "4.9.17-rc.1", "10.0.0+build.7"])
    def test_major_then_minor_resets_lower_parts(self, text: str):
        v = Version.parse(text)

        bumped = v.bump(BumpType.MAJOR).bump(BumpType.MINOR)

        assert bumped == Version(v.major + 1, 1, 0)

    @pytest.mark.parametrize("bump", [BumpType.MAJOR, BumpType.MINOR, BumpType.PATCH])
    @pytest.mark.parametrize(
        "text", ["0.0.0", "1.2.3", "1.2.3-beta.2", "2.0.0-rc.1", "0.9.9-alpha+exp"]
    )
    def test_bump_always_increases(self, text: str, bump: BumpType):
        v = Version.parse(text)

        assert v < v.bump(bump)
        assert compare_versions(v, v.bump(bump)) is Ordering.LESS

    def test_bump_none_raises(self):
        """NONE is not a valid bump to apply."""
        with pytest.raises(InvalidBumpError, match="Invalid bump type"):
            Version.parse("1.2.3").bump(BumpType.NONE)

    def test_invalid_bump_is_value_error(self):
        with pytest.raises(ValueError):
            Version(0, 0, 0).bump(BumpType.NONE)

    def test_with_prerelease(self):
        v = Version.parse("2.0.0").with_prerelease("rc.1")

        assert str(v) == "2.0.0-rc.1"
        assert v.is_prerelease

    def test_with_invalid_prerelease(self):
        with pytest.raises(InvalidVersionError):
            Version.parse("2.0.0").with_prerelease("rc..1")


class TestVersionTag:
    """Tests for Version.tag()."""

    def test_default_prefix(self):
        assert Version.parse("1.2.3").tag() == "v1.2.3"

    def test_custom_prefix(self):
        assert Version.parse("1.2.3").tag("release-") == "release-1.2.3"

    def test_tag_keeps_prerelease_drops_build(self):
        assert Version.parse("1.2.3-rc.1+build.7").tag() == "v1.2.3-rc.1"


class TestVersionComparison:
    """Tests for SemVer precedence."""

    def test_core_ordering(self):
        assert Version.parse("1.9.9") < Version.parse("2.0.0")
        assert Version.parse("1.10.0") > Version.parse("1.9.0")

    def test_semver_precedence_chain(self):
        """The precedence example from the SemVer 2.0.0 document."""
        chain = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]
        versions = [Version.parse(text) for text in chain]

        for lower, higher in zip(versions, versions[1:], strict=False):
            assert compare_versions(lower, higher) is Ordering.LESS
            assert compare_versions(higher, lower) is Ordering.GREATER

    def test_release_beats_prerelease(self):
        assert Version.parse("1.0.0") > Version.parse("1.0.0-rc.99")

    def test_build_metadata_ignored(self):
        a = Version.parse("1.0.0+build.1")
        b = Version.parse("1.0.0+build.2")

        assert compare_versions(a, b) is Ordering.EQUAL
        assert a == b
        assert hash(a) == hash(b)

    def test_sorting(self):
        versions = [Version.parse(t) for t in ["1.0.0", "0.9.0", "1.0.0-rc.1", "0.10.0"]]

        assert [str(v) for v in sorted(versions)] == ["0.9.0", "0.10.0", "1.0.0-rc.1", "1.0.0"]


class TestBumpType:
    """Tests for BumpType ordering and clamping."""

    def test_total_order(self):
        assert BumpType.NONE < BumpType.PATCH < BumpType.MINOR < BumpType.MAJOR

    def test_max_bump(self):
        assert max_bump(BumpType.PATCH, BumpType.MAJOR) is BumpType.MAJOR
        assert max_bump(BumpType.MINOR, BumpType.NONE) is BumpType.MINOR

    @pytest.mark.parametrize(
        ("bump", "maximum", "expected"),
        [
            (BumpType.MAJOR, BumpType.MINOR, BumpType.MINOR),
            (BumpType.MAJOR, BumpType.PATCH, BumpType.PATCH),
            (BumpType.MINOR, BumpType.MAJOR, BumpType.MINOR),
            (BumpType.PATCH, BumpType.PATCH, BumpType.PATCH),
            (BumpType.NONE, BumpType.PATCH, BumpType.NONE),
        ],
    )
    def test_clamp_bump(self, bump: BumpType, maximum: BumpType, expected: BumpType):
        """Clamping is min(bump, maximum) and never raises."""
        assert clamp_bump(bump, maximum) is expected

    def test_str(self):
        assert str(BumpType.MINOR) == "minor"
