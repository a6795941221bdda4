"""Unit tests for changelog generation."""

from __future__ import annotations

import os
import stat
from datetime import date
from typing import TYPE_CHECKING

import pytest

from lgtm_ci.core.analyze import ChangelogSection, SectionKind, analyze_commits, group_commits
from lgtm_ci.core.changelog import (
    CHANGELOG_HEADER,
    ChangelogFormat,
    compare_url,
    format_commit_entry,
    insert_changelog_section,
    render_changelog,
    render_release_notes,
    update_changelog_file,
)
from lgtm_ci.core.commits import classify_commit, parse_commits
from lgtm_ci.core.version import Version
from lgtm_ci.exceptions import ChangelogError

if TYPE_CHECKING:
    from pathlib import Path

    from lgtm_ci.vcs.git import Commit


@pytest.fixture
def sections(sample_commits: list[Commit]) -> list[ChangelogSection]:
    return group_commits(parse_commits(sample_commits))


class TestFormatCommitEntry:
    """Tests for format_commit_entry()."""

    def test_full_with_scope(self):
        commit = classify_commit("1234567890", "feat(api): add endpoint")

        assert format_commit_entry(commit) == "- **api**: add endpoint (1234567)"

    def test_full_without_scope(self):
        commit = classify_commit("1234567890", "fix: handle null")

        assert format_commit_entry(commit) == "- handle null (1234567)"

    def test_simple(self):
        commit = classify_commit("1234567890", "feat(api): add endpoint")

        assert format_commit_entry(commit, ChangelogFormat.SIMPLE) == "- add endpoint"

    def test_with_type(self):
        scoped = classify_commit("1", "feat(api): add endpoint")
        plain = classify_commit("2", "fix: handle null")

        assert format_commit_entry(scoped, ChangelogFormat.WITH_TYPE) == "- feat(api): add endpoint"
        assert format_commit_entry(plain, ChangelogFormat.WITH_TYPE) == "- fix: handle null"


class TestRenderChangelog:
    """Tests for render_changelog()."""

    def test_full_format(self, sections: list[ChangelogSection]):
        result = render_changelog(sections, Version(1, 0, 0), "2024-01-01")

        assert result == (
            "## [1.0.0] - 2024-01-01\n"
            "\n"
            "### Breaking Changes\n"
            "\n"
            "- redesign configuration (eeeeeee)\n"
            "\n"
            "### Features\n"
            "\n"
            "- **api**: add user endpoint (aaaaaaa)\n"
            "\n"
            "### Bug Fixes\n"
            "\n"
            "- handle null response (bbbbbbb)\n"
            "\n"
            "### Documentation\n"
            "\n"
            "- update README (ccccccc)\n"
            "\n"
            "### Other Changes\n"
            "\n"
            "- update dependencies (ddddddd)\n"
            "- Merge branch 'main' into feature (fffffff)\n"
        )

    def test_simple_format_omits_other_changes(self, sections: list[ChangelogSection]):
        result = render_changelog(sections, "1.0.0", "2024-01-01", ChangelogFormat.SIMPLE)

        assert "### Other Changes" not in result
        assert "- add user endpoint\n" in result
        assert "(aaaaaaa)" not in result

    def test_with_type_format_omits_other_changes(self, sections: list[ChangelogSection]):
        result = render_changelog(sections, "1.0.0", "2024-01-01", ChangelogFormat.WITH_TYPE)

        assert "### Other Changes" not in result
        assert "- feat!: redesign configuration" not in result
        assert "- feat: redesign configuration\n" in result
        assert "- feat(api): add user endpoint\n" in result

    def test_unreleased_heading(self, sections: list[ChangelogSection]):
        result = render_changelog(sections)

        assert result.startswith("## Unreleased\n\n### Breaking Changes\n")

    def test_date_object(self):
        result = render_changelog([], "2.0.0", date(2025, 3, 9))

        assert result == "## [2.0.0] - 2025-03-09\n"

    def test_breaking_changes_lead_whatever_the_input_order(
        self, sections: list[ChangelogSection]
    ):
        result = render_changelog(list(reversed(sections)), "1.0.0", "2024-01-01")

        assert result.index("### Breaking Changes") < result.index("### Features")
        assert result.index("### Documentation") < result.index("### Other Changes")

    def test_empty_sections_are_skipped(self):
        fixes = ChangelogSection(SectionKind.FIXES, (classify_commit("a" * 7, "fix: one"),))
        empty = ChangelogSection(SectionKind.FEATURES)

        result = render_changelog([empty, fixes], "0.1.1", "2024-01-01")

        assert "### Features" not in result
        assert "### Bug Fixes\n\n- one (aaaaaaa)\n" in result

    def test_rendering_is_idempotent(self, sections: list[ChangelogSection]):
        first = render_changelog(sections, "1.0.0", "2024-01-01")

        assert render_changelog(sections, "1.0.0", "2024-01-01") == first


class TestRenderReleaseNotes:
    """Tests for render_release_notes()."""

    def test_summary_line(self, sample_commits: list[Commit]):
        analysis = analyze_commits(parse_commits(sample_commits))

        notes = render_release_notes(analysis, "2.0.0", "2024-01-01")

        assert notes.startswith(
            "This release includes: 1 breaking change(s), 1 feature(s), 1 fix(es), "
            "1 documentation update(s)\n\n## [2.0.0] - 2024-01-01\n"
        )
        assert "### Other Changes" not in notes

    def test_no_summary_for_other_only(self):
        analysis = analyze_commits([classify_commit("a" * 40, "chore: tidy")])

        notes = render_release_notes(analysis, "1.0.1", "2024-01-01")

        assert notes == "## [1.0.1] - 2024-01-01\n"


class TestInsertChangelogSection:
    """Tests for insert_changelog_section()."""

    NEW = "## [1.1.0] - 2024-02-01\n\n### Features\n\n- thing\n"

    def test_inserted_before_first_version_heading(self):
        existing = f"{CHANGELOG_HEADER}\n## [1.0.0] - 2024-01-01\n\n- initial\n"

        result = insert_changelog_section(existing, self.NEW)

        assert result.startswith(CHANGELOG_HEADER)
        assert result.index("## [1.1.0]") < result.index("## [1.0.0]")
        assert result.endswith("## [1.0.0] - 2024-01-01\n\n- initial\n")

    def test_prepended_when_file_starts_with_heading(self):
        existing = "## [1.0.0] - 2024-01-01\n\n- initial\n"

        result = insert_changelog_section(existing, self.NEW)

        assert result == f"{self.NEW}\n{existing}"

    def test_appended_without_version_headings(self):
        existing = "# Changelog\n\nNotes go here.\n"

        result = insert_changelog_section(existing, self.NEW)

        assert result == f"# Changelog\n\nNotes go here.\n\n{self.NEW}"


class TestUpdateChangelogFile:
    """Tests for update_changelog_file()."""

    def test_creates_file_with_header(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"

        update_changelog_file(path, "## [0.1.0] - 2024-01-01\n\n- first\n")

        content = path.read_text()
        assert content.startswith("# Changelog\n")
        assert content.endswith("## [0.1.0] - 2024-01-01\n\n- first\n")

    def test_updates_existing_file(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"
        path.write_text(f"{CHANGELOG_HEADER}\n## [0.1.0] - 2024-01-01\n\n- first\n")

        update_changelog_file(path, "## [0.2.0] - 2024-02-01\n\n- second\n")

        content = path.read_text()
        assert content.index("## [0.2.0]") < content.index("## [0.1.0]")
        assert content.count("# Changelog") == 1

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_keeps_permissions(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"
        path.write_text("## [0.1.0] - 2024-01-01\n")
        path.chmod(0o640)

        update_changelog_file(path, "## [0.2.0] - 2024-02-01\n")

        assert stat.S_IMODE(path.stat().st_mode) == 0o640
        assert not list(tmp_path.glob(".changelog.*"))

    def test_unreadable_path_raises(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"
        path.mkdir()

        with pytest.raises(ChangelogError, match="Could not update"):
            update_changelog_file(path, "## [0.2.0] - 2024-02-01\n")


class TestCompareUrl:
    """Tests for compare_url()."""

    def test_url(self):
        assert (
            compare_url("octo/repo", "v1.0.0", "v1.1.0")
            == "https://github.com/octo/repo/compare/v1.0.0...v1.1.0"
        )

    def test_missing_part(self):
        assert compare_url("octo/repo", "", "v1.1.0") is None
