"""Pluggy hook specifications for agentbox plugins.

All hooks use the "agentbox" namespace and are validated by pluggy at
registration time.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("agentbox")
hookimpl = pluggy.HookimplMarker("agentbox")


class AgentboxSpec:
    """Hook specifications for agentbox plugins."""

    @hookspec
    def agentbox_container_runtime(self) -> Any | None:
        """Provide a container runtime implementation.

        Runtime plugins can return an object with:
            - name (str): runtime identifier (e.g., "podman")
            - cli (str): container CLI command (e.g., "podman")
            - is_available() -> bool
            - version(timeout: float) -> str
            - ensure_running(timeout: float) -> None

        ``version`` and ``ensure_running`` raise
        :class:`agentbox.errors.RequirementError` on failure.

        Returns:
            Runtime object, or None if this plugin doesn't provide one.
        """
