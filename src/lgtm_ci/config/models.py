"""Configuration models for lgtm-ci.

All models are pydantic ``BaseModel`` subclasses with defaults matching
the behaviour of the lgtm-ci release actions, so an empty
``[tool.lgtm-ci]`` table (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lgtm_ci.core.changelog import ChangelogFormat
from lgtm_ci.core.commits import (
    DEFAULT_DOCS_TYPES,
    DEFAULT_FEATURE_TYPES,
    DEFAULT_FIX_TYPES,
    DEFAULT_SKIP_RELEASE_PATTERNS,
)
from lgtm_ci.core.version import BumpType, is_valid_version


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class CommitsConfig(_Model):
    """How commit types map to changelog sections and version bumps."""

    feature_types: list[str] = Field(default_factory=lambda: sorted(DEFAULT_FEATURE_TYPES))
    fix_types: list[str] = Field(default_factory=lambda: sorted(DEFAULT_FIX_TYPES))
    docs_types: list[str] = Field(default_factory=lambda: sorted(DEFAULT_DOCS_TYPES))
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIP_RELEASE_PATTERNS)
    )


class ChangelogConfig(_Model):
    """Changelog rendering and file options."""

    path: Path = Path("CHANGELOG.md")
    format: ChangelogFormat = ChangelogFormat.FULL


class VersionConfig(_Model):
    """Version calculation options."""

    tag_prefix: str = "v"
    max_bump: BumpType = BumpType.MAJOR
    initial_version: str = "0.0.0"

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str) -> str:
        if not is_valid_version(value):
            raise ValueError(f"not a valid semantic version: {value!r}")
        return value

    @field_validator("max_bump")
    @classmethod
    def _check_max_bump(cls, value: BumpType) -> BumpType:
        if value == BumpType.NONE:
            raise ValueError("max_bump must be one of: patch, minor, major")
        return value


class GitHubConfig(_Model):
    """GitHub tag and release options."""

    repo: str | None = None
    remote: str = "origin"
    push_tags: bool = False
    draft: bool = False
    generate_notes: bool = False


class ReleaseConfig(_Model):
    """Root configuration, read from ``[tool.lgtm-ci]``."""

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @property
    def tag_prefix(self) -> str:
        return self.version.tag_prefix

    @property
    def tag_pattern(self) -> str:
        return f"{self.version.tag_prefix}*"


__all__ = [
    "ChangelogConfig",
    "ChangelogFormat",
    "CommitsConfig",
    "GitHubConfig",
    "ReleaseConfig",
    "VersionConfig",
]
