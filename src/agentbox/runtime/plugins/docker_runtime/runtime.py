"""Docker container runtime provider for agentbox."""

from __future__ import annotations

import sys

from agentbox.runtime.runtime import CliContainerRuntime


class DockerContainerRuntime(CliContainerRuntime):
    """Runtime adapter for the Docker CLI."""

    name = "docker"
    cli = "docker"
    install_hint = "Please install Docker and ensure it's running"

    @property
    def start_hint(self) -> str:  # type: ignore[override]
        if sys.platform == "darwin":
            return "Start Docker Desktop and wait for it to report 'running'"
        return "Start with: sudo systemctl start docker"
