"""Git repository access via the git binary.

Every operation is a blocking ``git`` subprocess call. Failures are
raised as :class:`~lgtm_ci.exceptions.GitError` carrying git's stderr
verbatim; nothing is retried.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from lgtm_ci.exceptions import GitError, NotAGitRepositoryError, RefNotFoundError
from lgtm_ci.logging import get_logger

log = get_logger(__name__)

# Record and field separators for ``git log --format``; neither can
# appear in a commit message.
_RECORD_SEP = "\x1e"
_FIELD_SEP = "\x1f"
_LOG_FORMAT = f"%H{_FIELD_SEP}%B{_RECORD_SEP}"

CI_USER_NAME = "github-actions[bot]"
CI_USER_EMAIL = "github-actions[bot]@users.noreply.github.com"


@dataclass(frozen=True)
class Commit:
    """A commit read from git history.

    Attributes:
        sha: Full commit SHA.
        message: Full commit message (subject, body and trailers).
    """

    sha: str
    message: str

    @property
    def subject(self) -> str:
        return self.message.split("\n", 1)[0].strip()

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


class GitRepository:
    """A local git work tree.

    Args:
        path: Any directory inside the work tree.

    Raises:
        NotAGitRepositoryError: If ``path`` is not inside a git work tree.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else Path.cwd()
        try:
            self._run("rev-parse", "--is-inside-work-tree")
        except GitError as e:
            raise NotAGitRepositoryError(f"Not a git repository: {self.path}") from e

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        log.debug("git", args=list(args))
        try:
            return subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=check,
            )
        except FileNotFoundError as e:
            raise GitError("git not found on PATH") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {' '.join(args)} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e

    def _output(self, *args: str) -> str:
        return self._run(*args).stdout.strip()

    # -------------------------------------------------------------------------
    # Refs and tags
    # -------------------------------------------------------------------------

    def ref_exists(self, ref: str) -> bool:
        """Return whether ``ref`` resolves to an object."""
        if not ref:
            return False
        result = self._run("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", check=False)
        return result.returncode == 0

    def tag_exists(self, tag: str) -> bool:
        """Return whether a tag named ``tag`` exists."""
        if not tag:
            return False
        result = self._run("rev-parse", "--verify", "--quiet", f"refs/tags/{tag}", check=False)
        return result.returncode == 0

    def rev_parse(self, ref: str) -> str:
        """Resolve a ref to its object SHA.

        Raises:
            RefNotFoundError: If ``ref`` does not resolve.
        """
        result = self._run("rev-parse", "--verify", "--quiet", ref, check=False)
        if result.returncode != 0:
            raise RefNotFoundError(ref)
        return result.stdout.strip()

    @property
    def head_sha(self) -> str:
        return self.rev_parse("HEAD")

    def get_latest_tag(self, pattern: str = "v*", ref: str = "HEAD") -> str | None:
        """Return the most recent tag reachable from ``ref`` matching ``pattern``.

        This is the tag closest in history, not the highest version.
        """
        result = self._run(
            "describe", "--tags", "--abbrev=0", "--match", pattern, ref, check=False
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def get_tags(self, pattern: str = "v*") -> list[str]:
        """Return tags matching ``pattern``, highest version first."""
        output = self._output("tag", "--list", pattern, "--sort=-v:refname")
        return [line for line in output.splitlines() if line]

    def create_tag(self, name: str, message: str) -> str:
        """Create an annotated tag on HEAD and return the tag object's SHA.

        ``--cleanup=whitespace`` keeps Markdown headings, which the
        default ``strip`` mode would drop as comments.
        """
        self._run("tag", "--annotate", "--cleanup=whitespace", name, "--message", message)
        return self.rev_parse(f"refs/tags/{name}")

    def push_tag(self, name: str, remote: str = "origin") -> None:
        self._run("push", remote, f"refs/tags/{name}")

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def get_commits(self, from_ref: str = "", to_ref: str = "HEAD") -> list[Commit]:
        """Return commits in ``from_ref..to_ref``, newest first.

        Args:
            from_ref: Exclusive start. Empty means the beginning of history.
            to_ref: Inclusive end.

        Raises:
            RefNotFoundError: If either ref does not resolve. A typo'd
                ``from_ref`` must never silently widen the range to all
                of history.
        """
        if from_ref and not self.ref_exists(from_ref):
            raise RefNotFoundError(from_ref)
        if not self.ref_exists(to_ref):
            raise RefNotFoundError(to_ref)

        revision = f"{from_ref}..{to_ref}" if from_ref else to_ref
        output = self._run("log", f"--format={_LOG_FORMAT}", revision).stdout

        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, _, message = record.partition(_FIELD_SEP)
            commits.append(Commit(sha=sha.strip(), message=message.strip()))
        return commits

    # -------------------------------------------------------------------------
    # Working tree and config
    # -------------------------------------------------------------------------

    def is_dirty(self) -> bool:
        return bool(self._output("status", "--porcelain"))

    def remote_url(self, remote: str = "origin") -> str | None:
        result = self._run("remote", "get-url", remote, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def configure_ci_user(self) -> None:
        """Set the github-actions bot identity for commits and tags."""
        self._run("config", "user.name", CI_USER_NAME)
        self._run("config", "user.email", CI_USER_EMAIL)


__all__ = [
    "Commit",
    "GitRepository",
]
