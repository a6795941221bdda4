"""Gate commands: check-release-needed and validate-pr-title."""

from __future__ import annotations

import click

from lgtm_ci.cli.formatting import format_error, format_info, format_success
from lgtm_ci.core import commits
from lgtm_ci.exceptions import LgtmCiError


@click.command("check-release-needed")
@click.option(
    "--release-needed",
    envvar="RELEASE_NEEDED",
    type=click.BOOL,
    default=False,
    help="Result of calculate-version.",
)
@click.option("--next-version", envvar="NEXT_VERSION", default="", help="Next version.")
def check_release_needed(release_needed: bool, next_version: str) -> None:
    """Normalize the release-needed output of calculate-version.

    Fails if a release is needed but no next version was given.
    """
    from lgtm_ci.cli import _command_errors, emit_outputs

    with _command_errors() as console:
        if release_needed and not next_version:
            raise LgtmCiError("Release is needed but NEXT_VERSION is empty")
        if release_needed:
            format_info(f"Release needed: {next_version}", console)
        else:
            format_info("No release needed", console)
        emit_outputs({"release-needed": "true" if release_needed else "false"})


@click.command("validate-pr-title")
@click.option("--title", envvar="PR_TITLE", required=True, help="Pull request title.")
@click.option(
    "--allowed-types",
    envvar="ALLOWED_TYPES",
    default="",
    help="Comma-separated commit types (default: the conventional set).",
)
@click.option("--require-scope", envvar="REQUIRE_SCOPE", is_flag=True, help="Require a scope.")
@click.option(
    "--max-length", envvar="MAX_LENGTH", type=int, default=72, show_default=True, help="Max length."
)
def validate_pr_title(title: str, allowed_types: str, require_scope: bool, max_length: int) -> None:
    """Check that a pull request title is a conventional commit subject."""
    from lgtm_ci.cli import _command_errors, emit_outputs

    types = frozenset(t.strip().lower() for t in allowed_types.split(",") if t.strip())
    with _command_errors() as console:
        result = commits.validate_pr_title(
            title,
            allowed_types=types or commits.DEFAULT_ALLOWED_TYPES,
            require_scope=require_scope,
            max_length=max_length,
        )
        emit_outputs(
            {
                "valid": "true" if result.is_valid else "false",
                "type": result.commit_type or "",
                "scope": result.scope or "",
                "breaking": "true" if result.is_breaking else "false",
            }
        )
        if not result.is_valid:
            format_error(result.error or "Invalid PR title", console)
            raise SystemExit(1)
        format_success("PR title is valid", console)
