"""Validation of untrusted input before it reaches a process boundary."""

from agentbox.security.validation import (
    ALLOWED_SCHEMES,
    TRUSTED_HOSTS,
    validate_branch_name,
    validate_repo_name,
    validate_repository_url,
)

__all__ = [
    "ALLOWED_SCHEMES",
    "TRUSTED_HOSTS",
    "validate_branch_name",
    "validate_repo_name",
    "validate_repository_url",
]
