"""Config staging mounts and LaunchSpec -> CLI arg serialization."""

from __future__ import annotations

import re

from agentbox.errors import LaunchError
from agentbox.types import ConfigCategory, ConfigDiscoveryResult, LaunchSpec, VolumeMount

# Host config is mounted read-only at a staging path; the container's
# entrypoint copies it into place with the right ownership.
STAGING_TARGETS: dict[ConfigCategory, tuple[str, str]] = {
    ConfigCategory.PRIMARY_SHARE: ("/tmp/host-opencode-local-share", "HOST_OPENCODE_LOCAL_SHARE"),
    ConfigCategory.PRIMARY_CONFIG: ("/tmp/host-opencode-config", "HOST_OPENCODE_CONFIG"),
}

STATE_VOLUME_TARGET = "/home/node/.local/state"
WORKSPACE_VOLUME_TARGET = "/workspace"

_ENV_KEY_RE = re.compile(r"[A-Z_][A-Z0-9_]*")
# Field separators of each syntax, plus line breaks
_BAD_BIND_CHARS = re.compile(r"[,\"\n\r\x00]")  # --mount type=bind,...
_BAD_VOLUME_CHARS = re.compile(r"[:\n\r\x00]")  # -v host:container


def build_config_mounts(
    discovery: ConfigDiscoveryResult,
) -> tuple[list[VolumeMount], dict[str, str]]:
    mounts: list[VolumeMount] = []
    env: dict[str, str] = {}
    for category, (target, env_var) in STAGING_TARGETS.items():
        host_path = discovery.get(category)
        if host_path is None:
            continue
        mounts.append(VolumeMount(str(host_path), target, readonly=True))
        env[env_var] = target
    return mounts, env


def _check_mount(mount: VolumeMount) -> None:
    bad_chars = _BAD_BIND_CHARS if mount.readonly else _BAD_VOLUME_CHARS
    for path in (mount.host_path, mount.container_path):
        if not path.startswith("/") or bad_chars.search(path):
            raise LaunchError(f"Refusing to mount unsupported path: {path!r}")


def _check_env(key: str, value: str) -> None:
    if _ENV_KEY_RE.fullmatch(key) is None:
        raise LaunchError(f"Refusing to export invalid environment name: {key!r}")
    if "\n" in value or "\x00" in value:
        raise LaunchError(f"Refusing to export multi-line value for {key}")


def build_container_args(spec: LaunchSpec) -> list[str]:
    """Build CLI args for ``<engine> run`` from a LaunchSpec.

    Returned as an argv list, never joined into a shell string.
    """
    # --rm removes the container on exit; named volumes survive it and are
    # removed by the lifecycle manager.
    args = ["run", "--rm", "--name", spec.container_name]
    if spec.interactive:
        args.insert(1, "-it")

    if spec.security.no_new_privileges:
        args.extend(["--security-opt", "no-new-privileges:true"])
    for cap in spec.security.cap_drop:
        args.extend(["--cap-drop", cap])
    for cap in spec.security.cap_add:
        args.extend(["--cap-add", cap])

    args.extend(["--network", spec.network])

    for m in spec.mounts:
        _check_mount(m)
        if m.readonly:
            args.extend(
                [
                    "--mount",
                    f"type=bind,source={m.host_path},target={m.container_path},readonly",
                ]
            )
        else:
            args.extend(["-v", f"{m.host_path}:{m.container_path}"])

    args.extend(["-v", f"{spec.volumes.state}:{STATE_VOLUME_TARGET}"])
    args.extend(["-v", f"{spec.volumes.workspace}:{WORKSPACE_VOLUME_TARGET}"])

    for key, value in spec.env.items():
        _check_env(key, value)
        args.extend(["-e", f"{key}={value}"])

    args.append(spec.image)
    args.extend(spec.command)
    return args
