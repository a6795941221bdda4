"""lgtm-ci create-github-release -- publish a release for an existing tag."""

from __future__ import annotations

from pathlib import Path

import click

from lgtm_ci.cli.formatting import format_info, format_success, format_warning
from lgtm_ci.core.analyze import analyze_range
from lgtm_ci.core.changelog import render_release_notes
from lgtm_ci.core.release import version_from_ref
from lgtm_ci.exceptions import InvalidVersionError
from lgtm_ci.github import releases
from lgtm_ci.github.releases import resolve_repository


class _AssetPath(click.Path):
    """Path whose ``FILES`` env var is split on whitespace, not ``os.pathsep``."""

    envvar_list_splitter = None


@click.command("create-github-release")
@click.option("--tag", envvar="TAG", required=True, help="Tag to release.")
@click.option("--title", envvar="TITLE", default="", help="Release title (default: the tag).")
@click.option("--body", envvar="BODY", default="", help="Release notes (default: generated).")
@click.option("--draft", envvar="DRAFT", is_flag=True, help="Create as a draft.")
@click.option("--prerelease", envvar="PRERELEASE", is_flag=True, help="Mark as a prerelease.")
@click.option(
    "--generate-notes", envvar="GENERATE_NOTES", is_flag=True, help="Let GitHub write the notes."
)
@click.option(
    "--file",
    "files",
    envvar="FILES",
    multiple=True,
    type=_AssetPath(path_type=Path),
    help="File to attach; repeatable. FILES is whitespace-separated.",
)
@click.option("--github-repo", envvar="REPO", default="", help="owner/repo (default: from remote).")
@click.pass_context
def create_github_release(
    ctx: click.Context,
    tag: str,
    title: str,
    body: str,
    draft: bool,
    prerelease: bool,
    generate_notes: bool,
    files: tuple[Path, ...],
    github_repo: str,
) -> None:
    """Create a GitHub release for TAG with the gh CLI.

    Without --body the notes are rendered from the commits between the
    previous tag and TAG.
    """
    from lgtm_ci.cli import _command_errors, _get_config, _get_repo, emit_outputs

    with _command_errors() as console:
        repo = _get_repo(ctx)
        config = _get_config(ctx)
        github_repo = (
            github_repo
            or config.github.repo
            or resolve_repository(repo.remote_url(config.github.remote))
        )
        generate_notes = generate_notes or config.github.generate_notes

        if not body and not generate_notes:
            previous = repo.get_latest_tag(config.tag_pattern, f"{tag}^") or ""
            analysis = analyze_range(repo, previous, tag, config.commits)
            try:
                version = version_from_ref(tag, config.tag_prefix)
            except InvalidVersionError:
                format_warning(f"Tag {tag} is not a version; notes will have no version", console)
                version = None
            body = render_release_notes(analysis, version)

        format_info(f"Creating GitHub release for {tag} in {github_repo}", console)
        release = releases.create_github_release(
            tag,
            github_repo,
            title=title or None,
            body=body,
            draft=draft or config.github.draft,
            prerelease=prerelease,
            generate_notes=generate_notes,
            files=files,
            cwd=repo.path,
        )
        format_success(f"Created release: {release.url}", console)

        emit_outputs(release.outputs())
