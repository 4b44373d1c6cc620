"""Credential forwarding.

The host's SSH agent socket is mounted into the container and exported as
``SSH_AUTH_SOCK``.  Signing happens on the host; key material is never
read or copied here.  The read-only ``~/.ssh`` fallback mount is opt-in.
"""

from __future__ import annotations

from pathlib import Path

from agentbox.context import SessionContext
from agentbox.types import VolumeMount

AGENT_SOCKET_TARGET = "/ssh-agent"
SSH_DIR_TARGET = "/host-ssh"
GITCONFIG_TARGET = "/home/node/.gitconfig"


def build_credential_mounts(
    ctx: SessionContext, agent_socket: Path
) -> tuple[list[VolumeMount], dict[str, str]]:
    """Return the mounts and env vars that forward credentials by reference."""
    s = ctx.settings
    home = s.home_dir

    # Read-write: connecting to a UNIX socket needs write permission on it
    mounts = [VolumeMount(str(agent_socket), AGENT_SOCKET_TARGET, readonly=False)]
    env = {"SSH_AUTH_SOCK": AGENT_SOCKET_TARGET}

    if s.credentials.mount_ssh_dir:
        ssh_dir = home / ".ssh"
        if ssh_dir.is_dir():
            mounts.append(VolumeMount(str(ssh_dir), SSH_DIR_TARGET, readonly=True))
            ctx.log.info("Mounting SSH directory read-only for fallback key access")

    if s.credentials.mount_gitconfig:
        gitconfig = home / ".gitconfig"
        if gitconfig.is_file():
            mounts.append(VolumeMount(str(gitconfig), GITCONFIG_TARGET, readonly=True))

    return mounts, env
