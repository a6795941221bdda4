"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lgtm_ci.config.models import ReleaseConfig
from lgtm_ci.exceptions import ConfigNotFoundError, ConfigValidationError
from lgtm_ci.logging import get_logger

log = get_logger(__name__)

TOOL_KEY = "lgtm-ci"


def find_pyproject_toml(start: Path | None = None) -> Path | None:
    """Search ``start`` and its parents for a pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Read and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If ``path`` does not exist.
        ConfigValidationError: If the file is not valid TOML.
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tool_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.lgtm-ci]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_KEY, {})


def load_config(path: Path | None = None, *, config_file: Path | None = None) -> ReleaseConfig:
    """Load the release configuration.

    Args:
        path: Directory to start searching for pyproject.toml from.
        config_file: Explicit config file; must exist.

    Returns:
        The validated configuration. Defaults are used when no
        pyproject.toml or no ``[tool.lgtm-ci]`` table is found.

    Raises:
        ConfigNotFoundError: If ``config_file`` is given but missing.
        ConfigValidationError: If the configuration is invalid.
    """
    pyproject_path = config_file or find_pyproject_toml(path)
    if pyproject_path is None:
        log.debug("no pyproject.toml found, using defaults")
        return ReleaseConfig()

    data = extract_tool_config(load_pyproject_toml(pyproject_path))
    try:
        config = ReleaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_KEY}] in {pyproject_path}: {e}") from e

    log.debug("loaded config", path=str(pyproject_path))
    return config


__all__ = [
    "extract_tool_config",
    "find_pyproject_toml",
    "load_config",
    "load_pyproject_toml",
]
