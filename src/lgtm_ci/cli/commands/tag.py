"""lgtm-ci create-git-tag -- create the annotated release tag."""

from __future__ import annotations

import os

import click

from lgtm_ci.cli.formatting import format_info, format_success
from lgtm_ci.core.release import create_release_tag
from lgtm_ci.core.version import Version


@click.command("create-git-tag")
@click.option("--version", "version", envvar="VERSION", required=True, help="Version to tag.")
@click.option("--tag-prefix", envvar="TAG_PREFIX", default=None, help="Tag prefix (default: v).")
@click.option("--message", envvar="MESSAGE", default="", help="Tag message (default: changelog).")
@click.option("--push", envvar="PUSH", is_flag=True, help="Push the tag to the remote.")
@click.option(
    "--from-ref", envvar="FROM_REF", default="", help="Changelog start ref (default: latest tag)."
)
@click.pass_context
def create_git_tag(
    ctx: click.Context,
    version: str,
    tag_prefix: str | None,
    message: str,
    push: bool,
    from_ref: str,
) -> None:
    """Create an annotated tag for VERSION on HEAD.

    Fails without touching the repository if the tag already exists.
    """
    from lgtm_ci.cli import _command_errors, _get_config, _get_repo, emit_outputs

    with _command_errors() as console:
        repo = _get_repo(ctx)
        config = _get_config(ctx)
        prefix = config.tag_prefix if tag_prefix is None else tag_prefix
        parsed = Version.parse(version)

        format_info(f"Creating tag: {parsed.tag(prefix)}", console)
        result = create_release_tag(
            repo,
            parsed,
            tag_prefix=prefix,
            message=message or None,
            from_ref=from_ref or None,
            push=push or config.github.push_tags,
            remote=config.github.remote,
            ci_identity=bool(os.environ.get("GITHUB_ACTIONS")),
        )
        format_success(f"Created tag: {result.tag_name}", console)
        if result.pushed:
            format_success(f"Pushed tag: {result.tag_name}", console)

        emit_outputs(result.outputs())
