"""lgtm-ci write-release-summary -- Markdown summary for the workflow run."""

from __future__ import annotations

from enum import Enum

import click

from lgtm_ci.cli.formatting import format_warning
from lgtm_ci.github.actions import (
    ActionsEnvironment,
    write_dry_run_summary,
    write_release_summary as write_created_summary,
)


class SummaryType(str, Enum):
    DRY_RUN = "dry-run"
    RELEASE = "release"


@click.command("write-release-summary")
@click.option(
    "--summary-type",
    envvar="SUMMARY_TYPE",
    type=click.Choice([t.value for t in SummaryType]),
    default=SummaryType.RELEASE.value,
    show_default=True,
)
@click.option("--version", "version", envvar="VERSION", required=True, help="Released version.")
@click.option("--tag-prefix", envvar="TAG_PREFIX", default="v", show_default=True)
@click.option("--bump-type", envvar="BUMP_TYPE", default="", help="Bump type (dry-run).")
@click.option("--changelog", envvar="CHANGELOG", default="", help="Changelog preview (dry-run).")
@click.option("--tag-name", envvar="TAG_NAME", default="", help="Created tag (release).")
@click.option("--release-url", envvar="RELEASE_URL", default="", help="Release URL (release).")
def write_release_summary(
    summary_type: str,
    version: str,
    tag_prefix: str,
    bump_type: str,
    changelog: str,
    tag_name: str,
    release_url: str,
) -> None:
    """Append a dry-run or release summary to GITHUB_STEP_SUMMARY."""
    from lgtm_ci.cli import _command_errors

    with _command_errors() as console:
        env = ActionsEnvironment.from_env()
        if env.summary_file is None:
            format_warning("GITHUB_STEP_SUMMARY is not set; nothing written", console)
            return

        if SummaryType(summary_type) is SummaryType.DRY_RUN:
            write_dry_run_summary(
                env,
                version=version,
                tag_prefix=tag_prefix,
                bump_type=bump_type,
                changelog=changelog,
            )
        else:
            write_created_summary(env, version=version, tag_name=tag_name, release_url=release_url)
