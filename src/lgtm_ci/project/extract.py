"""Reading and writing the version declared by a project.

Supports the manifests a release workflow usually carries:
``pyproject.toml`` (PEP 621 ``[project]`` or ``[tool.poetry]``),
``package.json`` and ``Cargo.toml`` (``[package]``).

Writing is limited to pyproject.toml and is done with a targeted regex
replacement so formatting and comments survive.
"""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path

from lgtm_ci.exceptions import ProjectError, VersionNotFoundError

_PYPROJECT_SECTIONS = ("project", "tool.poetry")

_VERSION_LINE = re.compile(r'^(version\s*=\s*)["\'][^"\']+["\']', re.MULTILINE)


def _section_pattern(section: str) -> re.Pattern[str]:
    # The whole table up to the next header or EOF.
    return re.compile(rf"^\[{re.escape(section)}\].*?(?=^\[|\Z)", re.MULTILINE | re.DOTALL)


def _read_toml(path: Path) -> dict:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ProjectError(f"Could not read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ProjectError(f"Invalid TOML in {path}: {e}") from e


def get_pyproject_version(path: Path) -> str:
    """Get the version from pyproject.toml.

    Args:
        path: Path to pyproject.toml

    Returns:
        Version string

    Raises:
        VersionNotFoundError: If neither ``[project].version`` nor
            ``[tool.poetry].version`` is set.
    """
    data = _read_toml(path)
    version = data.get("project", {}).get("version")
    if not version:
        version = data.get("tool", {}).get("poetry", {}).get("version")
    if not version:
        raise VersionNotFoundError(
            f"Could not find version in {path}. "
            "Expected [project].version or [tool.poetry].version."
        )
    return str(version)


def get_package_json_version(path: Path) -> str:
    """Get the ``version`` field of a package.json."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProjectError(f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ProjectError(f"Invalid JSON in {path}: {e}") from e

    version = data.get("version") if isinstance(data, dict) else None
    if not version:
        raise VersionNotFoundError(f"Could not find version in {path}")
    return str(version)


def get_cargo_version(path: Path) -> str:
    """Get ``[package].version`` from a Cargo.toml."""
    version = _read_toml(path).get("package", {}).get("version")
    if not isinstance(version, str) or not version:
        raise VersionNotFoundError(f"Could not find version in {path}. Expected [package].version.")
    return version


_READERS = {
    "pyproject.toml": get_pyproject_version,
    "package.json": get_package_json_version,
    "Cargo.toml": get_cargo_version,
}


def get_project_version(directory: Path) -> tuple[str, Path]:
    """Find the project version in ``directory``.

    Manifests are tried in the order pyproject.toml, package.json,
    Cargo.toml. A manifest without a version is skipped.

    Returns:
        The version and the file it was read from.

    Raises:
        VersionNotFoundError: If no manifest declares a version.
    """
    for name, reader in _READERS.items():
        candidate = directory / name
        if not candidate.is_file():
            continue
        try:
            return reader(candidate), candidate
        except VersionNotFoundError:
            continue
    raise VersionNotFoundError(
        f"No version found in {directory}. Looked in: {', '.join(_READERS)}"
    )


def update_pyproject_version(path: Path, new_version: str) -> Path:
    """Update the version in pyproject.toml.

    Args:
        path: Path to pyproject.toml or directory containing it
        new_version: New version string to set

    Returns:
        Path to the updated pyproject.toml

    Raises:
        VersionNotFoundError: If no version line exists to update
        ProjectError: If the version is already ``new_version``
    """
    pyproject_path = path / "pyproject.toml" if path.is_dir() else path
    if not pyproject_path.is_file():
        raise ProjectError(f"pyproject.toml not found: {pyproject_path}")
    content = pyproject_path.read_text(encoding="utf-8")

    def replace_version(match: re.Match[str]) -> str:
        return _VERSION_LINE.sub(rf'\g<1>"{new_version}"', match.group(0), count=1)

    for section in _PYPROJECT_SECTIONS:
        pattern = _section_pattern(section)
        table = pattern.search(content)
        if table is None or not _VERSION_LINE.search(table.group(0)):
            continue
        new_content = pattern.sub(replace_version, content, count=1)
        if new_content == content:
            raise ProjectError(
                f"Version in {pyproject_path} was not updated. It may already be {new_version}."
            )
        pyproject_path.write_text(new_content, encoding="utf-8")
        return pyproject_path

    raise VersionNotFoundError(
        f"Could not find version to update in {pyproject_path}. "
        "Expected [project].version or [tool.poetry].version."
    )


__all__ = [
    "get_cargo_version",
    "get_package_json_version",
    "get_project_version",
    "get_pyproject_version",
    "update_pyproject_version",
]
