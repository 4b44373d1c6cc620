"""Podman container runtime plugin."""

from __future__ import annotations

from typing import Any

from agentbox.plugins.hookspecs import hookimpl

from .runtime import PodmanContainerRuntime


class PodmanRuntimePlugin:
    """Plugin providing the Podman container runtime."""

    @hookimpl
    def agentbox_container_runtime(self) -> Any | None:
        return PodmanContainerRuntime()
