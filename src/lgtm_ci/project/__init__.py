"""Project manifest handling."""

from __future__ import annotations

from lgtm_ci.project.extract import (
    get_project_version,
    get_pyproject_version,
    update_pyproject_version,
)

__all__ = [
    "get_project_version",
    "get_pyproject_version",
    "update_pyproject_version",
]
