"""Error taxonomy.

Every failure the CLI reports maps to one of these classes.  Fatal errors
carry the process exit code; :class:`CleanupWarning` is never raised out of
the lifecycle manager, it travels inside a :class:`~agentbox.types.CleanupResult`.
"""

from __future__ import annotations


class AgentboxError(Exception):
    """Base class for all reported failures."""

    exit_code: int = 1

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ValidationError(AgentboxError):
    """Untrusted input failed validation."""


class RequirementError(AgentboxError):
    """A host precondition is missing (engine, daemon, git, agent socket)."""


class BuildError(AgentboxError):
    """The container image could not be built."""


class LaunchError(AgentboxError):
    """The container process could not be spawned."""


class SessionCancelled(AgentboxError):
    """A termination signal arrived before the container was spawned."""

    exit_code = 130


class CleanupWarning(AgentboxError):
    """A best-effort teardown step failed."""

    def __init__(self, resource: str, reason: str) -> None:
        super().__init__(f"Failed to clean up {resource}: {reason}")
        self.resource = resource
        self.reason = reason
