"""GitHub integration: Actions command files and hosted releases."""

from __future__ import annotations

from lgtm_ci.github.actions import (
    ActionsEnvironment,
    format_outputs,
    write_dry_run_summary,
    write_release_summary,
)
from lgtm_ci.github.releases import GitHubRelease, create_github_release, resolve_repository

__all__ = [
    "ActionsEnvironment",
    "GitHubRelease",
    "create_github_release",
    "format_outputs",
    "resolve_repository",
    "write_dry_run_summary",
    "write_release_summary",
]
