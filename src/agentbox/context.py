"""Per-run context passed explicitly into each component.

Carries the settings, a logger (re-bound with the session id once one
exists) and the cancellation state that the top-level signal handlers
write to.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from agentbox.config import Settings, get_settings
from agentbox.logger import logger


@dataclass
class SessionContext:
    settings: Settings = field(default_factory=get_settings)
    log: Any = field(default_factory=lambda: logger)
    cancelled: asyncio.Event = field(default_factory=asyncio.Event)
    signal_name: str | None = None
    session_id: str | None = None

    def bind_session(self, session_id: str) -> None:
        self.session_id = session_id
        self.log = self.log.bind(session=session_id)

    def cancel(self, signal_name: str) -> None:
        """Record a termination signal.  Called from the loop's signal handlers."""
        if self.signal_name is None:
            self.signal_name = signal_name
        self.log.info("Received signal", signal=signal_name)
        self.cancelled.set()
