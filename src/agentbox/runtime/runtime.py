"""Container runtime detection with plugin-extensible providers.

Docker and Podman are built in.  Additional runtimes can be provided by
plugins via ``agentbox_container_runtime``.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Any, Protocol, runtime_checkable

from agentbox.config import get_settings
from agentbox.errors import RequirementError
from agentbox.logger import logger


@runtime_checkable
class RuntimeProvider(Protocol):
    """Runtime provider contract implemented by built-ins and plugins."""

    name: str
    cli: str

    def is_available(self) -> bool: ...
    def version(self, timeout: float) -> str: ...
    def ensure_running(self, timeout: float) -> None: ...


class CliContainerRuntime:
    """Runtime adapter for a Docker-compatible CLI.

    Subclasses set ``name``, ``cli`` and the remediation hints.
    """

    name = ""
    cli = ""
    install_hint = ""
    start_hint = ""

    def is_available(self) -> bool:
        return shutil.which(self.cli) is not None

    def version(self, timeout: float) -> str:
        try:
            result = subprocess.run(
                [self.cli, "--version"],
                capture_output=True,
                text=True,
                timeout=timeout,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise RequirementError(
                f"{self.cli} is not installed, not in PATH, or not accessible",
                hint=self.install_hint,
            ) from exc
        return result.stdout.strip()

    def ensure_running(self, timeout: float) -> None:
        try:
            subprocess.run(
                [self.cli, "info"],
                capture_output=True,
                timeout=timeout,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise RequirementError(
                f"{self.name} daemon is not running or not reachable",
                hint=self.start_hint,
            ) from exc


def _is_valid_plugin_runtime(candidate: Any) -> bool:
    return all(
        [
            isinstance(getattr(candidate, "name", None), str),
            isinstance(getattr(candidate, "cli", None), str),
            callable(getattr(candidate, "is_available", None)),
            callable(getattr(candidate, "version", None)),
            callable(getattr(candidate, "ensure_running", None)),
        ]
    )


def _iter_plugin_runtimes() -> list[RuntimeProvider]:
    from agentbox.plugins import collect_hook_results

    return collect_hook_results(
        "agentbox_container_runtime",
        _is_valid_plugin_runtime,
        "runtime",
    )


def detect_runtime() -> RuntimeProvider:
    """Detect the container runtime to use.

    Priority:
    1) settings.container.runtime override (if known)
    2) docker, if its CLI is on PATH
    3) first other available runtime
    4) docker, so the requirement check reports it as missing
    """
    from agentbox.runtime.plugins.docker_runtime.runtime import DockerContainerRuntime

    override = (get_settings().container.runtime or "").lower().strip()
    candidates: dict[str, RuntimeProvider] = {}
    for runtime in _iter_plugin_runtimes():
        name = runtime.name.lower().strip()
        if not name:
            continue
        if name in candidates:
            logger.warning("Duplicate runtime provider ignored", runtime=name)
            continue
        candidates[name] = runtime

    if override:
        selected = candidates.get(override)
        if selected is not None:
            return selected
        logger.warning("Unknown runtime override; falling back to auto-detection", runtime=override)

    docker = candidates.get("docker") or DockerContainerRuntime()
    if docker.is_available():
        return docker

    for name, runtime in candidates.items():
        if name != "docker" and runtime.is_available():
            return runtime

    return docker


_runtime: RuntimeProvider | None = None


def get_runtime() -> RuntimeProvider:
    """Lazy singleton — caches the result of detect_runtime()."""
    global _runtime  # noqa: PLW0603
    if _runtime is None:
        _runtime = detect_runtime()
        logger.debug("Container runtime detected", name=_runtime.name, cli=_runtime.cli)
    return _runtime


def reset_runtime() -> None:
    """Clear the cached runtime (for tests)."""
    global _runtime  # noqa: PLW0603
    _runtime = None
