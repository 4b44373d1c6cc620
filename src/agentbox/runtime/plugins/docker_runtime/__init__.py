"""Docker container runtime plugin."""

from __future__ import annotations

from typing import Any

from agentbox.plugins.hookspecs import hookimpl

from .runtime import DockerContainerRuntime


class DockerRuntimePlugin:
    """Plugin providing the Docker container runtime."""

    @hookimpl
    def agentbox_container_runtime(self) -> Any | None:
        return DockerContainerRuntime()
