"""Tests for GitHub Actions command files and summaries."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import pytest

from lgtm_ci.github.actions import (
    ActionsEnvironment,
    format_outputs,
    write_dry_run_summary,
    write_release_summary,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def actions_env(tmp_path: Path) -> ActionsEnvironment:
    return ActionsEnvironment.from_env(
        {
            "GITHUB_OUTPUT": str(tmp_path / "output"),
            "GITHUB_ENV": str(tmp_path / "env"),
            "GITHUB_STEP_SUMMARY": str(tmp_path / "summary"),
            "GITHUB_ACTIONS": "true",
        }
    )


class TestActionsEnvironment:
    """Tests for ActionsEnvironment."""

    def test_from_env(self, actions_env: ActionsEnvironment, tmp_path: Path):
        assert actions_env.output_file == tmp_path / "output"
        assert actions_env.in_actions

    def test_from_empty_env(self):
        env = ActionsEnvironment.from_env({})

        assert env.output_file is None
        assert env.summary_file is None
        assert not env.in_actions

    def test_writers_are_noops_outside_actions(self):
        env = ActionsEnvironment.from_env({})

        env.set_output("key", "value")
        env.set_env("KEY", "value")
        env.add_summary("# nothing")

    def test_set_output(self, actions_env: ActionsEnvironment):
        actions_env.set_outputs({"next-version": "1.3.0", "release-needed": "true"})

        assert actions_env.output_file.read_text() == "next-version=1.3.0\nrelease-needed=true\n"

    def test_multiline_output_uses_heredoc(self, actions_env: ActionsEnvironment):
        actions_env.set_output("changelog", "## [1.0.0]\n\n- thing")

        content = actions_env.output_file.read_text()
        match = re.fullmatch(r"changelog<<(\S+)\n## \[1\.0\.0\]\n\n- thing\n(\S+)\n", content)
        assert match
        assert match.group(1) == match.group(2)
        assert match.group(1).startswith("LGTM_CI_EOF_")

    def test_delimiters_are_unique(self, actions_env: ActionsEnvironment):
        actions_env.set_output("a", "x\ny")
        actions_env.set_output("b", "x\ny")

        delimiters = re.findall(r"<<(\S+)", actions_env.output_file.read_text())
        assert len(set(delimiters)) == 2

    def test_set_env(self, actions_env: ActionsEnvironment):
        actions_env.set_env("RELEASE_VERSION", "1.3.0")

        assert actions_env.env_file.read_text() == "RELEASE_VERSION=1.3.0\n"

    def test_summary_helpers(self, actions_env: ActionsEnvironment):
        actions_env.add_summary("## Title", "")
        actions_env.add_summary_row("a", "b")
        actions_env.add_summary_details("More", "hidden")

        assert actions_env.summary_file.read_text() == (
            "## Title\n"
            "\n"
            "| a | b |\n"
            "<details>\n"
            "<summary>More</summary>\n"
            "\n"
            "hidden\n"
            "\n"
            "</details>\n"
        )


class TestFormatOutputs:
    def test_key_value_lines(self):
        assert format_outputs({"a": "1", "b": ""}) == "a=1\nb=\n"


class TestReleaseSummaries:
    """Tests for the dry-run and release summaries."""

    def test_dry_run_summary(self, actions_env: ActionsEnvironment):
        write_dry_run_summary(
            actions_env,
            version="1.3.0",
            tag_prefix="v",
            bump_type="minor",
            changelog="### Features\n\n- thing",
        )

        content = actions_env.summary_file.read_text()
        assert content.startswith("## Dry Run Summary\n\nWould create release:\n")
        assert "- **Tag:** v1.3.0\n" in content
        assert "- **Bump type:** minor\n" in content
        assert content.endswith("### Changelog Preview\n\n### Features\n\n- thing\n")

    def test_release_summary(self, actions_env: ActionsEnvironment):
        write_release_summary(
            actions_env,
            version="1.3.0",
            tag_name="v1.3.0",
            release_url="https://github.com/octo/widgets/releases/tag/v1.3.0",
        )

        assert actions_env.summary_file.read_text() == (
            "## Release Created\n"
            "\n"
            "- **Version:** 1.3.0\n"
            "- **Tag:** v1.3.0\n"
            "- **Release:** https://github.com/octo/widgets/releases/tag/v1.3.0\n"
        )
