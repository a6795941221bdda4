"""GitHub Actions outputs, environment and step summaries.

Writes to the files GitHub Actions exposes through ``GITHUB_OUTPUT``,
``GITHUB_ENV`` and ``GITHUB_STEP_SUMMARY``. Every writer is a no-op
when its variable is unset, so the same code runs locally.
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class ActionsEnvironment:
    """Paths of the GitHub Actions command files for this step."""

    output_file: Path | None = None
    env_file: Path | None = None
    summary_file: Path | None = None
    in_actions: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ActionsEnvironment:
        env = os.environ if environ is None else environ

        def _path(name: str) -> Path | None:
            value = env.get(name, "")
            return Path(value) if value else None

        return cls(
            output_file=_path("GITHUB_OUTPUT"),
            env_file=_path("GITHUB_ENV"),
            summary_file=_path("GITHUB_STEP_SUMMARY"),
            in_actions=env.get("GITHUB_ACTIONS", "") == "true",
        )

    def set_output(self, key: str, value: str) -> None:
        """Set a step output. Multi-line values use the heredoc form."""
        _append_variable(self.output_file, key, value)

    def set_outputs(self, outputs: Mapping[str, str]) -> None:
        for key, value in outputs.items():
            self.set_output(key, value)

    def set_env(self, key: str, value: str) -> None:
        """Export an environment variable to later steps."""
        _append_variable(self.env_file, key, value)

    def add_summary(self, *lines: str) -> None:
        """Append lines of Markdown to the step summary."""
        _append(self.summary_file, "".join(f"{line}\n" for line in lines))

    def add_summary_row(self, *columns: str) -> None:
        """Append a Markdown table row to the step summary."""
        if columns:
            self.add_summary("| " + " | ".join(columns) + " |")

    def add_summary_details(self, title: str, content: str) -> None:
        """Append a collapsible ``<details>`` block to the step summary."""
        self.add_summary("<details>", f"<summary>{title}</summary>", "", content, "", "</details>")


def _append(path: Path | None, text: str) -> None:
    if path is None:
        return
    with path.open("a", encoding="utf-8") as f:
        f.write(text)


def _append_variable(path: Path | None, key: str, value: str) -> None:
    if "\n" not in value:
        _append(path, f"{key}={value}\n")
        return
    delimiter = f"LGTM_CI_EOF_{uuid.uuid4().hex}"
    _append(path, f"{key}<<{delimiter}\n{value}\n{delimiter}\n")


def format_outputs(outputs: Mapping[str, str]) -> str:
    """Render outputs as ``key=value`` lines for stdout."""
    return "".join(f"{key}={value}\n" for key, value in outputs.items())


# =============================================================================
# Release summaries
# =============================================================================


def write_dry_run_summary(
    env: ActionsEnvironment,
    *,
    version: str,
    tag_prefix: str = "v",
    bump_type: str = "",
    changelog: str = "",
) -> None:
    """Describe the release a dry run would have created."""
    env.add_summary(
        "## Dry Run Summary",
        "",
        "Would create release:",
        f"- **Version:** {version}",
        f"- **Tag:** {tag_prefix}{version}",
        f"- **Bump type:** {bump_type}",
        "",
        "### Changelog Preview",
        "",
        changelog,
    )


def write_release_summary(
    env: ActionsEnvironment,
    *,
    version: str,
    tag_name: str = "",
    release_url: str = "",
) -> None:
    """Describe a release that was created."""
    env.add_summary(
        "## Release Created",
        "",
        f"- **Version:** {version}",
        f"- **Tag:** {tag_name}",
        f"- **Release:** {release_url}",
    )


__all__ = [
    "ActionsEnvironment",
    "format_outputs",
    "write_dry_run_summary",
    "write_release_summary",
]
