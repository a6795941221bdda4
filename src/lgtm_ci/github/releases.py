"""Hosted GitHub releases via the ``gh`` CLI.

``gh`` handles authentication (``GH_TOKEN``/``GITHUB_TOKEN``) and the
API; this module only builds its arguments and captures its output.
There is no retry: a failure is usually authentication or network and
is surfaced verbatim.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from lgtm_ci.exceptions import ConfigValidationError, ExternalToolError, GitHubCliError
from lgtm_ci.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

log = get_logger(__name__)

_REMOTE_PATTERN: re.Pattern[str] = re.compile(
    r"github\.com[:/](?P<repo>[^/]+/[^/]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True)
class GitHubRelease:
    """A release created on GitHub."""

    tag: str
    url: str
    id: str = ""
    stderr: str = ""

    def outputs(self) -> dict[str, str]:
        return {
            "release-url": self.url,
            "release-id": self.id,
            "tag": self.tag,
        }


def resolve_repository(remote_url: str | None) -> str:
    """Extract ``owner/repo`` from a GitHub remote URL.

    >>> resolve_repository("git@github.com:lgtm-ci/toolkit.git")
    'lgtm-ci/toolkit'

    Raises:
        ConfigValidationError: If the URL is not a GitHub remote.
    """
    match = _REMOTE_PATTERN.search(remote_url or "")
    if not match:
        raise ConfigValidationError("Could not determine repository from git remote")
    return match.group("repo")


def build_release_args(
    tag: str,
    repo: str,
    *,
    title: str | None = None,
    body: str | None = None,
    draft: bool = False,
    prerelease: bool = False,
    generate_notes: bool = False,
    files: Sequence[Path] = (),
) -> list[str]:
    """Build the ``gh release create`` argument list.

    ``generate_notes`` wins over ``body``. Files that do not exist are
    skipped with a warning.
    """
    args = ["gh", "release", "create", tag, "--repo", repo, "--title", title or tag]
    if draft:
        args.append("--draft")
    if prerelease:
        args.append("--prerelease")
    if generate_notes:
        args.append("--generate-notes")
    elif body:
        args.extend(["--notes", body])
    else:
        args.extend(["--notes", ""])

    for file in files:
        if Path(file).is_file():
            args.append(str(file))
        else:
            log.warning("file not found, skipping", file=str(file))
    return args


def _run_gh(args: list[str], cwd: Path | None) -> subprocess.CompletedProcess[str]:
    if shutil.which(args[0]) is None:
        raise ExternalToolError("GitHub CLI (gh) is required but not found")
    try:
        return subprocess.run(args, capture_output=True, text=True, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        command = " ".join(args[:3])
        raise GitHubCliError(
            f"{command} failed with exit code {e.returncode}",
            stderr=e.stderr,
        ) from e


def create_github_release(
    tag: str,
    repo: str,
    *,
    title: str | None = None,
    body: str | None = None,
    draft: bool = False,
    prerelease: bool = False,
    generate_notes: bool = False,
    files: Sequence[Path] = (),
    cwd: Path | None = None,
) -> GitHubRelease:
    """Create a GitHub release for an existing tag.

    The orchestrator does not check whether the release already exists;
    callers re-running a release must check first.

    Returns:
        The created release. ``id`` is empty if it could not be looked up.

    Raises:
        ExternalToolError: If ``gh`` is not installed.
        GitHubCliError: If ``gh release create`` fails.
    """
    args = build_release_args(
        tag,
        repo,
        title=title,
        body=body,
        draft=draft,
        prerelease=prerelease,
        generate_notes=generate_notes,
        files=files,
    )
    log.debug("creating github release", tag=tag, repo=repo)
    result = _run_gh(args, cwd)
    url = result.stdout.strip()
    if result.stderr.strip():
        log.warning("gh stderr", stderr=result.stderr.strip())

    release_id = ""
    try:
        view = _run_gh(
            ["gh", "release", "view", tag, "--repo", repo, "--json", "id", "--jq", ".id"],
            cwd,
        )
        release_id = view.stdout.strip()
    except GitHubCliError as e:
        log.warning("could not look up release id", tag=tag, error=str(e))

    log.debug("created github release", url=url)
    return GitHubRelease(tag=tag, url=url, id=release_id, stderr=result.stderr.strip())


__all__ = [
    "GitHubRelease",
    "build_release_args",
    "create_github_release",
    "resolve_repository",
]
