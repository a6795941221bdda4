"""Exception hierarchy for lgtm-ci.

All lgtm-ci exceptions inherit from LgtmCiError so the CLI can turn
any of them into a single ``[ERROR]`` line and a non-zero exit.
"""

from __future__ import annotations


class LgtmCiError(Exception):
    """Base exception for all lgtm-ci errors."""


# =============================================================================
# Versions
# =============================================================================


class VersionError(LgtmCiError):
    """Base class for version handling errors."""


class InvalidVersionError(VersionError):
    """Raised when a version string is not valid SemVer."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(
            f"Invalid version: {version!r} (expected MAJOR.MINOR.PATCH[-prerelease][+build])"
        )


class InvalidBumpError(VersionError, ValueError):
    """Raised when a bump type cannot be applied to a version."""


# =============================================================================
# External tools
# =============================================================================


class ExternalToolError(LgtmCiError):
    """Raised when an external binary fails or is missing.

    The captured stderr is kept verbatim so the caller can surface it.
    """

    def __init__(self, message: str, stderr: str | None = None) -> None:
        self.stderr = (stderr or "").strip()
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class GitError(ExternalToolError):
    """Raised when a git command fails."""


class NotAGitRepositoryError(GitError):
    """Raised when the working directory is not a git work tree."""


class RefNotFoundError(GitError):
    """Raised when a ref does not resolve in the repository."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"Ref not found: {ref}")


class TagAlreadyExistsError(GitError):
    """Raised when creating a tag that is already present."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Tag {tag} already exists")


class GitHubCliError(ExternalToolError):
    """Raised when a ``gh`` command fails."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(LgtmCiError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file does not exist."""


class ConfigValidationError(ConfigError):
    """Raised when configuration values are invalid."""


# =============================================================================
# Changelog and project files
# =============================================================================


class ChangelogError(LgtmCiError):
    """Raised when the changelog cannot be generated or written."""


class ProjectError(LgtmCiError):
    """Raised for problems with project metadata files."""


class VersionNotFoundError(ProjectError):
    """Raised when no version can be found in a project file."""


__all__ = [
    "ChangelogError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ExternalToolError",
    "GitError",
    "GitHubCliError",
    "InvalidBumpError",
    "InvalidVersionError",
    "LgtmCiError",
    "NotAGitRepositoryError",
    "ProjectError",
    "RefNotFoundError",
    "TagAlreadyExistsError",
    "VersionError",
    "VersionNotFoundError",
]
