"""lgtm-ci CLI -- release steps for GitHub Actions workflows.

Every option also reads an environment variable, so a workflow step can
configure a command purely through ``env:``. Outputs are printed to
stdout as ``key=value`` lines and appended to ``GITHUB_OUTPUT``.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import click

from lgtm_ci import __version__
from lgtm_ci.cli.formatting import format_error, get_console
from lgtm_ci.config import load_config
from lgtm_ci.exceptions import LgtmCiError
from lgtm_ci.github.actions import ActionsEnvironment, format_outputs
from lgtm_ci.logging import configure_logging
from lgtm_ci.vcs import GitRepository

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from rich.console import Console

    from lgtm_ci.config.models import ReleaseConfig


@click.group()
@click.option(
    "--repo",
    "repo_path",
    default=".",
    envvar="LGTM_CI_REPO",
    type=click.Path(file_okay=False, path_type=Path),
    help="Path to the git repository.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors.")
@click.option("--json-log", is_flag=True, envvar="LGTM_CI_JSON_LOG", help="Log as JSON lines.")
@click.version_option(__version__, prog_name="lgtm-ci")
@click.pass_context
def cli(ctx: click.Context, repo_path: Path, verbose: bool, quiet: bool, json_log: bool) -> None:
    """lgtm-ci: conventional-commit driven releases."""
    configure_logging(verbose=verbose, quiet=quiet, json_log=json_log)
    ctx.ensure_object(dict)
    ctx.obj["repo_path"] = repo_path


@contextmanager
def _command_errors() -> Iterator[Console]:
    """Yield a stderr console and turn LgtmCiError into ``[ERROR]`` + exit 1."""
    console = get_console()
    try:
        yield console
    except LgtmCiError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


def _get_repo(ctx: click.Context) -> GitRepository:
    return GitRepository(ctx.obj["repo_path"])


def _get_config(ctx: click.Context) -> ReleaseConfig:
    return load_config(ctx.obj["repo_path"])


def emit_outputs(outputs: Mapping[str, str], *, echo: bool = True) -> None:
    """Write step outputs to ``GITHUB_OUTPUT`` and, optionally, stdout."""
    ActionsEnvironment.from_env().set_outputs(outputs)
    if echo:
        click.echo(format_outputs(outputs), nl=False)


# Register subcommands after cli group is defined
from lgtm_ci.cli.commands.changelog import generate_changelog  # noqa: E402
from lgtm_ci.cli.commands.check import check_release_needed, validate_pr_title  # noqa: E402
from lgtm_ci.cli.commands.project import project_version  # noqa: E402
from lgtm_ci.cli.commands.release import create_github_release  # noqa: E402
from lgtm_ci.cli.commands.run import run  # noqa: E402
from lgtm_ci.cli.commands.summary import write_release_summary  # noqa: E402
from lgtm_ci.cli.commands.tag import create_git_tag  # noqa: E402
from lgtm_ci.cli.commands.version import calculate_version  # noqa: E402

cli.add_command(calculate_version)
cli.add_command(generate_changelog)
cli.add_command(create_git_tag)
cli.add_command(create_github_release)
cli.add_command(check_release_needed)
cli.add_command(write_release_summary)
cli.add_command(validate_pr_title)
cli.add_command(project_version)
cli.add_command(run)


def main() -> None:
    cli()
