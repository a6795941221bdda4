"""lgtm-ci project-version -- read or set the version a project declares."""

from __future__ import annotations

import click

from lgtm_ci.cli.formatting import format_info, format_success
from lgtm_ci.core.version import Version
from lgtm_ci.project.extract import get_project_version, update_pyproject_version


@click.command("project-version")
@click.option(
    "--set",
    "new_version",
    envvar="SET_VERSION",
    default="",
    help="Write this version to pyproject.toml instead of reading.",
)
@click.pass_context
def project_version(ctx: click.Context, new_version: str) -> None:
    """Print the version from pyproject.toml, package.json or Cargo.toml."""
    from lgtm_ci.cli import _command_errors, emit_outputs

    directory = ctx.obj["repo_path"]
    with _command_errors() as console:
        if new_version:
            clean = str(Version.parse(new_version))
            path = update_pyproject_version(directory, clean)
            format_success(f"Set version {clean} in {path}", console)
            emit_outputs({"version": clean, "file": str(path)})
            return

        version, path = get_project_version(directory)
        format_info(f"Found version {version} in {path.name}", console)
        emit_outputs({"version": version, "file": str(path)})
