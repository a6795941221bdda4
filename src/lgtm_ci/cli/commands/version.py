"""lgtm-ci calculate-version -- next version from conventional commits."""

from __future__ import annotations

import click

from lgtm_ci.cli.formatting import format_info, format_success
from lgtm_ci.core.release import plan_release
from lgtm_ci.core.version import BumpType

_BUMP_CHOICES = [BumpType.MAJOR.value, BumpType.MINOR.value, BumpType.PATCH.value]


@click.command("calculate-version")
@click.option(
    "--max-bump",
    envvar="MAX_BUMP",
    type=click.Choice(_BUMP_CHOICES, case_sensitive=False),
    default=None,
    help="Largest bump allowed (default: from config, else major).",
)
@click.option("--from-ref", envvar="FROM_REF", default="", help="Start ref (default: latest tag).")
@click.option("--to-ref", envvar="TO_REF", default="HEAD", show_default=True, help="End ref.")
@click.option("--tag-prefix", envvar="TAG_PREFIX", default=None, help="Tag prefix (default: v).")
@click.pass_context
def calculate_version(
    ctx: click.Context,
    max_bump: str | None,
    from_ref: str,
    to_ref: str,
    tag_prefix: str | None,
) -> None:
    """Calculate the next semantic version.

    Outputs current-version, next-version, bump-type and release-needed.
    """
    from lgtm_ci.cli import _command_errors, _get_config, _get_repo, emit_outputs

    with _command_errors() as console:
        repo = _get_repo(ctx)
        config = _get_config(ctx)
        if max_bump:
            config.version.max_bump = BumpType(max_bump.lower())
        if tag_prefix is not None:
            config.version.tag_prefix = tag_prefix

        plan = plan_release(repo, config, from_ref=from_ref or None, to_ref=to_ref)

        format_info(f"Current version: {plan.current_version}", console)
        if plan.release_needed:
            if plan.was_clamped:
                format_info(
                    f"Bump type clamped from {plan.detected_bump} to {plan.bump} "
                    f"(max: {config.version.max_bump})",
                    console,
                )
            format_success(f"Next version: {plan.next_version}", console)
        else:
            format_info("No releasable commits found", console)

        emit_outputs(plan.outputs())
