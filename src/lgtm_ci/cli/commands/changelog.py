"""lgtm-ci generate-changelog -- render the changelog for a commit range.

The changelog goes to stdout (or ``--output-file``) and to the
multi-line ``changelog`` step output. ``--update-file`` also inserts it
into the project's CHANGELOG.md.
"""

from __future__ import annotations

from pathlib import Path

import click

from lgtm_ci.cli.formatting import format_info, format_success
from lgtm_ci.core.analyze import analyze_range
from lgtm_ci.core.changelog import ChangelogFormat, render_changelog, update_changelog_file
from lgtm_ci.core.version import Version
from lgtm_ci.exceptions import ChangelogError


@click.command("generate-changelog")
@click.option("--from-ref", envvar="FROM_REF", default="", help="Start ref (default: latest tag).")
@click.option("--to-ref", envvar="TO_REF", default="HEAD", show_default=True, help="End ref.")
@click.option("--version", "version", envvar="VERSION", default="", help="Version for the heading.")
@click.option(
    "--format",
    "fmt",
    envvar="FORMAT",
    type=click.Choice([f.value for f in ChangelogFormat]),
    default=None,
    help="Entry format (default: from config, else full).",
)
@click.option(
    "--output-file",
    envvar="OUTPUT_FILE",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the changelog here instead of stdout.",
)
@click.option(
    "--update-file",
    envvar="UPDATE_FILE",
    is_flag=True,
    help="Insert the changelog into the configured CHANGELOG.md.",
)
@click.pass_context
def generate_changelog(
    ctx: click.Context,
    from_ref: str,
    to_ref: str,
    version: str,
    fmt: str | None,
    output_file: Path | None,
    update_file: bool,
) -> None:
    """Generate a changelog from conventional commits."""
    from lgtm_ci.cli import _command_errors, _get_config, _get_repo, emit_outputs

    with _command_errors() as console:
        repo = _get_repo(ctx)
        config = _get_config(ctx)

        if not from_ref:
            from_ref = repo.get_latest_tag(config.tag_pattern, to_ref) or ""
        format_info(f"Generating changelog from '{from_ref or 'beginning'}' to '{to_ref}'", console)

        analysis = analyze_range(repo, from_ref, to_ref, config.commits)
        changelog = render_changelog(
            analysis.sections,
            Version.parse(version) if version else None,
            fmt=ChangelogFormat(fmt) if fmt else config.changelog.format,
        )

        if output_file is not None:
            try:
                output_file.write_text(changelog, encoding="utf-8")
            except OSError as e:
                raise ChangelogError(f"Could not write {output_file}: {e}") from e
            format_success(f"Changelog written to: {output_file}", console)
        else:
            click.echo(changelog, nl=False)

        if update_file:
            path = config.changelog.path
            if not path.is_absolute():
                path = repo.path / path
            update_changelog_file(path, changelog)
            format_success(f"Updated {path}", console)

        emit_outputs({"changelog": changelog.rstrip("\n")}, echo=False)
