"""Preflight checks for host preconditions.

Each check is independent and fail-fast: the first failure raises
:class:`~agentbox.errors.RequirementError` with a remediation hint.  No
retries; these are environment problems the operator has to fix.
"""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

from agentbox.context import SessionContext
from agentbox.errors import RequirementError
from agentbox.git_ops import is_inside_work_tree
from agentbox.runtime import RuntimeProvider


def _agent_hint() -> str:
    if sys.platform == "darwin":
        return 'On macOS, try: eval "$(ssh-agent -s)" && ssh-add --apple-use-keychain ~/.ssh/id_rsa'
    return 'Run: eval "$(ssh-agent -s)" && ssh-add ~/.ssh/id_rsa'


def check_agent_socket(env_var: str = "SSH_AUTH_SOCK") -> Path:
    """Return the credential-agent socket path, which must be a live socket."""
    raw = os.environ.get(env_var)
    if not raw:
        raise RequirementError(
            "SSH agent not found. Please start ssh-agent and add your SSH keys.",
            hint=_agent_hint(),
        )

    path = Path(raw)
    if not path.is_absolute():
        raise RequirementError(f"{env_var} must be an absolute path", hint=_agent_hint())
    try:
        mode = path.stat().st_mode
    except OSError as exc:
        raise RequirementError(
            f"SSH agent socket is not accessible: {exc.strerror or exc}",
            hint=_agent_hint(),
        ) from exc
    if not stat.S_ISSOCK(mode):
        raise RequirementError(
            f"SSH agent path is not a socket: {path}",
            hint=_agent_hint(),
        )
    return path


def check_requirements(ctx: SessionContext, runtime: RuntimeProvider) -> Path:
    """Run every preflight check in order.

    Returns the verified agent socket path.
    """
    timeout = ctx.settings.timeouts.check
    ctx.log.info("Checking system requirements...")

    version = runtime.version(timeout)
    ctx.log.info("Container engine found", runtime=runtime.name, version=version)

    runtime.ensure_running(timeout)
    ctx.log.info("Container engine daemon is running", runtime=runtime.name)

    if not is_inside_work_tree(timeout=timeout):
        raise RequirementError(
            "Not in a git repository",
            hint="Run agentbox from inside a git project",
        )
    ctx.log.info("Git repository detected")

    socket_path = check_agent_socket(ctx.settings.credentials.agent_socket_env)
    ctx.log.info("SSH agent is accessible")

    ctx.log.info("All requirements satisfied")
    return socket_path
