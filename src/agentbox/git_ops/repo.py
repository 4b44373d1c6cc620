"""Read the repository reference from the host's Git metadata."""

from __future__ import annotations

import posixpath
import subprocess
from pathlib import Path

from agentbox.errors import RequirementError, ValidationError
from agentbox.types import RepositoryReference

_SUBPROCESS_TIMEOUT = 5


def run_git(
    *args: str,
    cwd: Path | None = None,
    timeout: float = _SUBPROCESS_TIMEOUT,
) -> subprocess.CompletedProcess[str]:
    """Run a git command with standard timeout and error capture."""
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def is_inside_work_tree(cwd: Path | None = None, timeout: float = _SUBPROCESS_TIMEOUT) -> bool:
    try:
        result = run_git("rev-parse", "--git-dir", cwd=cwd, timeout=timeout)
    except (OSError, subprocess.SubprocessError):
        return False
    return result.returncode == 0


def repo_name_from_url(url: str) -> str:
    """Last path component of a remote URL without ``.git``.

    Handles both ``https://host/owner/repo.git`` and ``git@host:owner/repo.git``.
    """
    tail = url.strip().rstrip("/").rsplit(":", 1)[-1]
    return posixpath.basename(tail).removesuffix(".git")


def read_repository_reference(
    cwd: Path | None = None, timeout: float = _SUBPROCESS_TIMEOUT
) -> RepositoryReference:
    """Build a validated reference from ``origin``'s URL and the current branch."""
    try:
        remote = run_git("config", "--get", "remote.origin.url", cwd=cwd, timeout=timeout)
        branch = run_git("branch", "--show-current", cwd=cwd, timeout=timeout)
    except (OSError, subprocess.SubprocessError) as exc:
        raise RequirementError("Failed to read repository information from git") from exc

    url = remote.stdout.strip()
    if remote.returncode != 0 or not url:
        raise ValidationError(
            "Repository has no 'origin' remote",
            hint="Add one with: git remote add origin <url>",
        )

    current_branch = branch.stdout.strip()
    if branch.returncode != 0 or not current_branch:
        raise ValidationError(
            "No branch is checked out (detached HEAD)",
            hint="Check out a branch with: git switch <branch>",
        )

    return RepositoryReference(
        url=url,
        name=repo_name_from_url(url),
        branch=current_branch,
    )
