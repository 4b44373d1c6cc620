"""Validators for the repository URL, branch and name.

These values come from the host's Git metadata, which is whatever the
checked-out repository says it is, and they end up as process arguments
and container environment.  Each validator either returns the trimmed
value or raises :class:`~agentbox.errors.ValidationError` with a short
reason.

Allow-lists (schemes, hosts, name characters) do the real work; the
shell-metacharacter block-list is a second layer.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from agentbox.errors import ValidationError

ALLOWED_SCHEMES = frozenset({"https", "ssh", "git"})

TRUSTED_HOSTS = frozenset(
    {
        "github.com",
        "gitlab.com",
        "bitbucket.org",
        "dev.azure.com",
        "ssh.dev.azure.com",
    }
)

MAX_BRANCH_LENGTH = 250
MAX_NAME_LENGTH = 100

_SHELL_METACHARS = re.compile(r"[;&|`$(){}\[\]<>]")
_CONTROL_OR_SPACE = re.compile(r"[\s\x00-\x1f\x7f]")
_HAS_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")

# user@host:owner/repo.git
_SCP_URL = re.compile(
    r"(?P<user>[A-Za-z0-9._-]+)@(?P<host>[A-Za-z0-9.-]+):"
    r"(?P<path>[A-Za-z0-9._-]+(?:/[A-Za-z0-9._-]+)*)\.git"
)

_BRANCH_INVALID = re.compile(r"[;&|`$(){}\[\]<>~^:?*\\\s\x00-\x1f\x7f]")
_NAME_VALID = re.compile(r"[A-Za-z0-9._-]+")


def _require_string(value: object, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required and must be a string")
    return value.strip()


def validate_repository_url(repo_url: object) -> str:
    """Accept ``https``/``ssh``/``git`` URLs and SCP-style remotes on trusted hosts."""
    url = _require_string(repo_url, "Repository URL")

    if _SHELL_METACHARS.search(url) or _CONTROL_OR_SPACE.search(url):
        raise ValidationError("Repository URL contains invalid characters")

    if _HAS_SCHEME.match(url):
        _check_standard_url(url)
        return url

    match = _SCP_URL.fullmatch(url)
    if match is None:
        raise ValidationError("Invalid repository URL format")
    host = match["host"].lower()
    if host not in TRUSTED_HOSTS:
        raise ValidationError(f"Untrusted SSH hostname: {host}")
    if ".." in match["path"]:
        raise ValidationError("Invalid repository URL format")
    return url


def _check_standard_url(url: str) -> None:
    try:
        parsed = urlsplit(url)
        # .port raises ValueError on a malformed port
        parsed.port  # noqa: B018
    except ValueError as exc:
        raise ValidationError("Invalid repository URL format") from exc

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise ValidationError("Only HTTPS, SSH, and Git protocols are allowed")

    host = parsed.hostname or ""
    if host not in TRUSTED_HOSTS:
        allowed = ", ".join(sorted(TRUSTED_HOSTS))
        raise ValidationError(f"Untrusted hostname: {host or '(none)'}. Only {allowed} are allowed")

    if parsed.password is not None:
        raise ValidationError("Repository URL must not embed credentials")


def validate_branch_name(branch_name: object) -> str:
    branch = _require_string(branch_name, "Branch name")

    if _BRANCH_INVALID.search(branch):
        raise ValidationError("Branch name contains invalid characters")

    # Leading "-" would be read as a git flag
    if branch.startswith("-") or branch.endswith(".") or ".." in branch:
        raise ValidationError("Invalid branch name format")

    if len(branch) > MAX_BRANCH_LENGTH:
        raise ValidationError("Branch name too long")

    return branch


def validate_repo_name(repo_name: object) -> str:
    name = _require_string(repo_name, "Repository name")

    if _NAME_VALID.fullmatch(name) is None:
        raise ValidationError("Repository name contains invalid characters")

    # The name becomes a directory inside the container workspace
    if name.startswith(".") or ".." in name:
        raise ValidationError("Invalid repository name format")

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError("Repository name too long")

    return name
