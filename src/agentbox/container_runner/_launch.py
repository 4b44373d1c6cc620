"""LaunchSpec construction — session naming, security flags, mounts, env."""

from __future__ import annotations

import secrets
import time
from pathlib import Path
from types import MappingProxyType

from agentbox.container_runner._credentials import build_credential_mounts
from agentbox.container_runner._mounts import build_config_mounts
from agentbox.context import SessionContext
from agentbox.types import (
    ConfigDiscoveryResult,
    EphemeralVolumes,
    LaunchSpec,
    RepositoryReference,
    SecurityOptions,
)

# File ownership and user switching inside the container; nothing broader.
MINIMAL_CAPABILITIES = ("CHOWN", "DAC_OVERRIDE", "SETGID", "SETUID")

ENTRYPOINT = ("/app/entrypoint.sh",)


def new_session_id() -> str:
    """Millisecond timestamp plus a random suffix, unique across concurrent runs."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def build_launch_spec(
    ctx: SessionContext,
    repo: RepositoryReference,
    discovery: ConfigDiscoveryResult,
    image: str,
    agent_socket: Path,
    *,
    session_id: str | None = None,
) -> LaunchSpec:
    s = ctx.settings
    session_id = session_id or new_session_id()
    ctx.bind_session(session_id)
    prefix = s.container.name_prefix

    credential_mounts, credential_env = build_credential_mounts(ctx, agent_socket)
    config_mounts, config_env = build_config_mounts(discovery)
    for mount in config_mounts:
        ctx.log.info("Will stage tool config", source=mount.host_path, target=mount.container_path)

    env = {
        **credential_env,
        "REPO_URL": repo.url,
        "REPO_NAME": repo.name,
        "REPO_BRANCH": repo.branch,
        **config_env,
    }

    return LaunchSpec(
        image=image,
        session_id=session_id,
        container_name=f"{prefix}-container-{session_id}",
        security=SecurityOptions(
            no_new_privileges=True,
            cap_drop=("ALL",),
            cap_add=MINIMAL_CAPABILITIES,
        ),
        mounts=tuple(credential_mounts + config_mounts),
        env=MappingProxyType(env),
        volumes=EphemeralVolumes(
            state=f"{prefix}-state-{session_id}",
            workspace=f"{prefix}-workspace-{session_id}",
        ),
        network=s.container.network,
        command=ENTRYPOINT,
    )
