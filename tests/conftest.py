"""Shared fixtures for lgtm-ci tests."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from lgtm_ci.vcs.git import Commit

# Variables the CLI and the Actions helpers read; a developer shell or a
# CI runner must not leak them into tests.
_ISOLATED_ENV_VARS = (
    "GITHUB_ACTIONS",
    "GITHUB_OUTPUT",
    "GITHUB_ENV",
    "GITHUB_STEP_SUMMARY",
    "LGTM_CI_REPO",
    "LGTM_CI_JSON_LOG",
    "VERBOSE",
    "STEP",
    "MAX_BUMP",
    "FROM_REF",
    "TO_REF",
    "TAG_PREFIX",
    "VERSION",
    "FORMAT",
    "OUTPUT_FILE",
    "UPDATE_FILE",
    "MESSAGE",
    "PUSH",
    "TAG",
    "TITLE",
    "BODY",
    "DRAFT",
    "PRERELEASE",
    "GENERATE_NOTES",
    "FILES",
    "REPO",
    "RELEASE_NEEDED",
    "NEXT_VERSION",
    "SUMMARY_TYPE",
    "BUMP_TYPE",
    "CHANGELOG",
    "TAG_NAME",
    "RELEASE_URL",
    "PR_TITLE",
    "ALLOWED_TYPES",
    "REQUIRE_SCOPE",
    "MAX_LENGTH",
    "SET_VERSION",
    "GITHUB_TOKEN",
    "GH_TOKEN",
    # Rich would emit ANSI codes around the status labels.
    "FORCE_COLOR",
    "TTY_COMPATIBLE",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep the user's global git config (signing, hooks, default branch) out.
    empty = tmp_path_factory.mktemp("gitconfig") / "config"
    empty.touch()
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(empty))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


@pytest.fixture
def sample_commits() -> list[Commit]:
    """Commits covering every changelog section, newest first."""
    return [
        Commit(sha="a" * 40, message="feat(api): add user endpoint"),
        Commit(sha="b" * 40, message="fix: handle null response"),
        Commit(sha="c" * 40, message="docs: update README"),
        Commit(sha="d" * 40, message="chore: update dependencies"),
        Commit(sha="e" * 40, message="feat!: redesign configuration"),
        Commit(sha="f" * 40, message="Merge branch 'main' into feature"),
    ]


class GitRepoBuilder:
    """Builds history in a throwaway repository with the real git binary."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.git("init", "--quiet", "--initial-branch=main")
        self.git("config", "user.name", "Test User")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "commit.gpgsign", "false")
        self.git("config", "tag.gpgsign", "false")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, message: str) -> str:
        """Create an empty commit and return its SHA."""
        self.git("commit", "--quiet", "--allow-empty", "--message", message)
        return self.git("rev-parse", "HEAD")

    def tag(self, name: str, message: str | None = None) -> None:
        self.git("tag", "--annotate", name, "--message", message or f"Release {name}")

    def tags(self) -> list[str]:
        return [line for line in self.git("tag", "--list").splitlines() if line]


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepoBuilder:
    """An empty repository with a committer identity configured."""
    path = tmp_path / "repo"
    path.mkdir()
    return GitRepoBuilder(path)


@pytest.fixture
def released_repo(git_repo: GitRepoBuilder) -> GitRepoBuilder:
    """A repository tagged v1.2.0 followed by a fix and a feature."""
    git_repo.commit("chore: initial commit")
    git_repo.commit("feat: first feature")
    git_repo.tag("v1.2.0")
    git_repo.commit("fix: correct rounding")
    git_repo.commit("feat(cli): add --json flag")
    return git_repo
