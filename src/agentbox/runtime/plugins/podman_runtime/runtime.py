"""Podman container runtime provider for agentbox.

Podman's CLI accepts the same ``run``/``build``/``volume``/``stop``
arguments agentbox uses, so only the names and hints differ.
"""

from __future__ import annotations

from agentbox.runtime.runtime import CliContainerRuntime


class PodmanContainerRuntime(CliContainerRuntime):
    name = "podman"
    cli = "podman"
    install_hint = "Please install Podman (https://podman.io/docs/installation)"
    start_hint = "On macOS/Windows run: podman machine start"
