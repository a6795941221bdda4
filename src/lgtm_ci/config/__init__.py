"""Configuration management for lgtm-ci."""

from __future__ import annotations

from lgtm_ci.config.loader import load_config
from lgtm_ci.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitHubConfig,
    ReleaseConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "GitHubConfig",
    "ReleaseConfig",
    "VersionConfig",
    "load_config",
]
