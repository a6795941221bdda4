"""Release orchestration.

Composes commit analysis, version bumping and changelog rendering into
a release plan, then tags and publishes it. The lifecycle is a small
state machine::

    ANALYZING -> NO_RELEASE_NEEDED
    ANALYZING -> RELEASE_READY -> TAGGED -> PUBLISHED

Nothing is rolled back: if a tag is created but pushing it fails, the
local tag stays and must be pushed or deleted by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from lgtm_ci.core.analyze import analyze_range
from lgtm_ci.core.changelog import (
    ChangelogFormat,
    render_changelog,
    render_release_notes,
    today,
)
from lgtm_ci.core.version import BumpType, Version, clamp_bump
from lgtm_ci.exceptions import InvalidVersionError, LgtmCiError, TagAlreadyExistsError
from lgtm_ci.github.releases import create_github_release, resolve_repository
from lgtm_ci.logging import get_logger

if TYPE_CHECKING:
    from lgtm_ci.config.models import ReleaseConfig
    from lgtm_ci.core.analyze import CommitAnalysis
    from lgtm_ci.github.releases import GitHubRelease
    from lgtm_ci.vcs.git import GitRepository

log = get_logger(__name__)


class ReleaseState(str, Enum):
    """Lifecycle states of a release."""

    ANALYZING = "analyzing"
    NO_RELEASE_NEEDED = "no-release-needed"
    RELEASE_READY = "release-ready"
    TAGGED = "tagged"
    PUBLISHED = "published"

    def __str__(self) -> str:
        return self.value


_TRANSITIONS: dict[ReleaseState, frozenset[ReleaseState]] = {
    ReleaseState.ANALYZING: frozenset(
        {ReleaseState.NO_RELEASE_NEEDED, ReleaseState.RELEASE_READY}
    ),
    ReleaseState.RELEASE_READY: frozenset({ReleaseState.TAGGED}),
    ReleaseState.TAGGED: frozenset({ReleaseState.PUBLISHED}),
    ReleaseState.NO_RELEASE_NEEDED: frozenset(),
    ReleaseState.PUBLISHED: frozenset(),
}


class InvalidTransitionError(LgtmCiError):
    """Raised when a release is moved to a state it cannot reach."""


@dataclass(frozen=True)
class ReleasePlan:
    """Everything decided about a release before any git mutation.

    Attributes:
        state: Current lifecycle state.
        from_ref: Tag or ref the analysis started from; empty for all history.
        current_version: Version derived from ``from_ref`` (``0.0.0`` if none).
        detected_bump: Bump implied by the commits.
        bump: Bump after clamping to the configured maximum.
        next_version: Version to release, or None if no release is needed.
        changelog: Rendered changelog section for ``next_version``.
        analysis: The underlying commit analysis.
        tag_prefix: Prefix used to build tag names.
    """

    state: ReleaseState
    from_ref: str
    current_version: Version
    detected_bump: BumpType
    bump: BumpType
    next_version: Version | None
    changelog: str
    analysis: CommitAnalysis
    tag_prefix: str = "v"

    @property
    def release_needed(self) -> bool:
        return self.next_version is not None

    @property
    def was_clamped(self) -> bool:
        return self.bump != self.detected_bump

    @property
    def tag_name(self) -> str | None:
        return self.next_version.tag(self.tag_prefix) if self.next_version else None

    def advance(self, state: ReleaseState) -> ReleasePlan:
        """Return a copy moved to ``state``.

        Raises:
            InvalidTransitionError: If ``state`` is not reachable from the
                current state.
        """
        if state not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"Cannot move release from {self.state} to {state}")
        return replace(self, state=state)

    def outputs(self) -> dict[str, str]:
        """GitHub Actions outputs describing the plan."""
        return {
            "current-version": str(self.current_version),
            "next-version": str(self.next_version) if self.next_version else "",
            "bump-type": str(self.bump),
            "release-needed": "true" if self.release_needed else "false",
        }


def version_from_ref(ref: str, tag_prefix: str = "v", default: str = "0.0.0") -> Version:
    """Derive the current version from a tag name.

    Raises:
        InvalidVersionError: If the tag, minus its prefix, is not SemVer.
    """
    if not ref:
        return Version.parse(default)
    text = ref.removeprefix(tag_prefix) if tag_prefix else ref
    try:
        return Version.parse(text)
    except InvalidVersionError as e:
        raise InvalidVersionError(ref) from e


def current_version(repo: GitRepository, config: ReleaseConfig, from_ref: str) -> Version:
    """Return the version a range starting at ``from_ref`` releases on top of.

    A version tag is read directly. Any other ref (a SHA, a branch) uses
    the latest version tag reachable from it, or the configured initial
    version when there is none.

    Raises:
        InvalidVersionError: If the reachable tag is not a version.
    """
    initial = config.version.initial_version
    if not from_ref:
        return Version.parse(initial)
    try:
        return version_from_ref(from_ref, config.tag_prefix, initial)
    except InvalidVersionError:
        pass
    latest = repo.get_latest_tag(config.tag_pattern, from_ref)
    log.debug("current version from reachable tag", from_ref=from_ref, tag=latest)
    return version_from_ref(latest or "", config.tag_prefix, initial)


def plan_release(
    repo: GitRepository,
    config: ReleaseConfig,
    *,
    from_ref: str | None = None,
    to_ref: str = "HEAD",
    release_date: str | None = None,
) -> ReleasePlan:
    """Decide whether a release is needed and what it looks like.

    Args:
        repo: Repository to analyze.
        config: Release configuration (tag prefix, bump ceiling, types).
        from_ref: Start of the range. ``None`` uses the latest reachable
            tag matching the tag prefix; empty means all history.
        to_ref: End of the range.
        release_date: Date for the changelog heading; defaults to today.

    Returns:
        A plan in state NO_RELEASE_NEEDED or RELEASE_READY.

    Raises:
        RefNotFoundError: If ``from_ref`` does not resolve. Checked before
            any version parsing.
        InvalidVersionError: If a release is needed and the starting tag
            is not a version.
    """
    if from_ref is None:
        from_ref = repo.get_latest_tag(config.tag_pattern, to_ref) or ""

    log.debug("analyzing commits", from_ref=from_ref or "beginning", to_ref=to_ref)
    analysis = analyze_range(repo, from_ref, to_ref, config.commits)

    if not analysis.release_needed:
        log.debug("no releasable commits found", commits=len(analysis.commits))
        try:
            current = current_version(repo, config, from_ref)
        except InvalidVersionError:
            current = Version.parse(config.version.initial_version)
        return ReleasePlan(
            state=ReleaseState.NO_RELEASE_NEEDED,
            from_ref=from_ref,
            current_version=current,
            detected_bump=BumpType.NONE,
            bump=BumpType.NONE,
            next_version=None,
            changelog="",
            analysis=analysis,
            tag_prefix=config.tag_prefix,
        )

    current = current_version(repo, config, from_ref)
    bump = clamp_bump(analysis.bump, config.version.max_bump)
    if bump != analysis.bump:
        log.debug(
            "bump clamped",
            detected=str(analysis.bump),
            bump=str(bump),
            max_bump=str(config.version.max_bump),
        )
    next_version = current.bump(bump)
    changelog = render_changelog(
        analysis.sections,
        next_version,
        release_date or today(),
        config.changelog.format,
    )
    log.debug("release ready", current=str(current), next=str(next_version), bump=str(bump))

    return ReleasePlan(
        state=ReleaseState.RELEASE_READY,
        from_ref=from_ref,
        current_version=current,
        detected_bump=analysis.bump,
        bump=bump,
        next_version=next_version,
        changelog=changelog,
        analysis=analysis,
        tag_prefix=config.tag_prefix,
    )


@dataclass(frozen=True)
class TagResult:
    """An annotated tag created for a release."""

    tag_name: str
    tag_sha: str
    commit_sha: str
    version: str
    pushed: bool = False

    def outputs(self) -> dict[str, str]:
        return {
            "tag-name": self.tag_name,
            "tag-sha": self.tag_sha,
            "commit-sha": self.commit_sha,
            "version": self.version,
        }


def tag_message(tag_name: str, changelog: str) -> str:
    """Default annotated tag message: title line plus the changelog."""
    changelog = changelog.strip()
    if not changelog:
        return f"Release {tag_name}"
    return f"Release {tag_name}\n\n{changelog}"


def create_release_tag(
    repo: GitRepository,
    version: Version | str,
    *,
    tag_prefix: str = "v",
    message: str | None = None,
    from_ref: str | None = None,
    push: bool = False,
    remote: str = "origin",
    ci_identity: bool = False,
) -> TagResult:
    """Create (and optionally push) the annotated tag for a version.

    Args:
        repo: Repository to tag; HEAD is tagged.
        version: Version to tag, with or without a leading ``v``.
        tag_prefix: Prefix for the tag name.
        message: Tag message. Defaults to ``Release <tag>`` followed by
            the full changelog since ``from_ref``.
        from_ref: Start of the changelog range; defaults to the latest tag.
        push: Push the tag to ``remote`` after creating it.
        remote: Remote to push to.
        ci_identity: Configure the github-actions bot as git user first.

    Returns:
        The created tag.

    Raises:
        InvalidVersionError: If ``version`` is not SemVer.
        TagAlreadyExistsError: If the tag exists. Raised before any git
            mutation happens.
        GitError: If creating or pushing the tag fails. A tag created
            before a failed push is left in place.
    """
    if not isinstance(version, Version):
        version = Version.parse(version)
    tag_name = version.tag(tag_prefix)

    if repo.tag_exists(tag_name):
        raise TagAlreadyExistsError(tag_name)

    if message is None:
        if from_ref is None:
            from_ref = repo.get_latest_tag(f"{tag_prefix}*") or ""
        analysis = analyze_range(repo, from_ref, "HEAD")
        changelog = render_changelog(analysis.sections, version, today(), ChangelogFormat.FULL)
        message = tag_message(tag_name, changelog)

    if ci_identity:
        repo.configure_ci_user()

    tag_sha = repo.create_tag(tag_name, message)
    log.debug("created tag", tag=tag_name)
    result = TagResult(
        tag_name=tag_name,
        tag_sha=tag_sha,
        commit_sha=repo.head_sha,
        version=str(version),
    )

    if push:
        repo.push_tag(tag_name, remote)
        log.debug("pushed tag", tag=tag_name, remote=remote)
        result = replace(result, pushed=True)
    return result


def tag_release(
    repo: GitRepository,
    plan: ReleasePlan,
    *,
    push: bool = False,
    remote: str = "origin",
    ci_identity: bool = False,
) -> tuple[ReleasePlan, TagResult]:
    """Move a RELEASE_READY plan to TAGGED by creating its tag.

    Raises:
        InvalidTransitionError: If the plan is not RELEASE_READY.
        TagAlreadyExistsError: If the tag already exists.
    """
    tagged = plan.advance(ReleaseState.TAGGED)
    result = create_release_tag(
        repo,
        tagged.next_version or "",
        tag_prefix=plan.tag_prefix,
        message=tag_message(plan.tag_name or "", plan.changelog),
        push=push,
        remote=remote,
        ci_identity=ci_identity,
    )
    return tagged, result


def publish_release(
    repo: GitRepository,
    plan: ReleasePlan,
    tag: TagResult,
    config: ReleaseConfig,
    *,
    title: str | None = None,
) -> tuple[ReleasePlan, GitHubRelease]:
    """Move a TAGGED plan to PUBLISHED by creating the GitHub release.

    The tag is pushed first unless it already was. Whether the release
    exists already is not checked.

    Raises:
        InvalidTransitionError: If the plan is not TAGGED.
        GitError: If pushing the tag fails.
        GitHubCliError: If ``gh`` fails.
    """
    published = plan.advance(ReleaseState.PUBLISHED)
    if not tag.pushed:
        repo.push_tag(tag.tag_name, config.github.remote)
    github_repo = config.github.repo or resolve_repository(repo.remote_url(config.github.remote))
    release = create_github_release(
        tag.tag_name,
        github_repo,
        title=title,
        body=render_release_notes(plan.analysis, plan.next_version),
        draft=config.github.draft,
        prerelease=bool(plan.next_version and plan.next_version.is_prerelease),
        generate_notes=config.github.generate_notes,
        cwd=repo.path,
    )
    return published, release


__all__ = [
    "InvalidTransitionError",
    "ReleasePlan",
    "ReleaseState",
    "TagResult",
    "create_release_tag",
    "current_version",
    "plan_release",
    "publish_release",
    "tag_message",
    "tag_release",
    "version_from_ref",
]
