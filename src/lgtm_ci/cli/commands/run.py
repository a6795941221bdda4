"""lgtm-ci run -- dispatch a release step by name.

Lets a single composite action select its step with ``STEP``. Unknown
names are rejected by ``click.Choice`` before anything runs.
"""

from __future__ import annotations

from enum import Enum

import click

from lgtm_ci.cli.commands.changelog import generate_changelog
from lgtm_ci.cli.commands.check import check_release_needed
from lgtm_ci.cli.commands.release import create_github_release
from lgtm_ci.cli.commands.summary import write_release_summary
from lgtm_ci.cli.commands.tag import create_git_tag
from lgtm_ci.cli.commands.version import calculate_version


class Step(str, Enum):
    """Release steps that ``run`` can dispatch to."""

    CALCULATE_VERSION = "calculate-version"
    GENERATE_CHANGELOG = "generate-changelog"
    CREATE_TAG = "create-git-tag"
    CREATE_RELEASE = "create-github-release"
    CHECK_RELEASE_NEEDED = "check-release-needed"
    WRITE_SUMMARY = "write-release-summary"


STEP_COMMANDS: dict[Step, click.Command] = {
    Step.CALCULATE_VERSION: calculate_version,
    Step.GENERATE_CHANGELOG: generate_changelog,
    Step.CREATE_TAG: create_git_tag,
    Step.CREATE_RELEASE: create_github_release,
    Step.CHECK_RELEASE_NEEDED: check_release_needed,
    Step.WRITE_SUMMARY: write_release_summary,
}


@click.command(context_settings={"ignore_unknown_options": True})
@click.option(
    "--step",
    envvar="STEP",
    required=True,
    type=click.Choice([s.value for s in Step]),
    help="Step to run.",
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run(ctx: click.Context, step: str, args: tuple[str, ...]) -> None:
    """Run a release STEP. Remaining ARGS are passed to the step."""
    command = STEP_COMMANDS[Step(step)]
    with command.make_context(command.name, list(args), parent=ctx) as sub_ctx:
        command.invoke(sub_ctx)
