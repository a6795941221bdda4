"""Version control access for lgtm-ci."""

from __future__ import annotations

from lgtm_ci.vcs.git import Commit, GitRepository

__all__ = [
    "Commit",
    "GitRepository",
]
