"""Session lifecycle — state machine, signal-triggered stop, volume cleanup.

States move ``starting -> running -> exiting -> cleaned``.  A child exit
and a termination signal both lead to ``exiting``; ``cleaned`` is reached
exactly once, after best-effort removal of the session's volumes.
Teardown failures come back as :class:`~agentbox.types.CleanupResult`
values and are logged as warnings, never raised.
"""

from __future__ import annotations

import asyncio
import contextlib

from agentbox.container_runner._docker import remove_volume, stop_container
from agentbox.context import SessionContext
from agentbox.types import CleanupResult, LaunchSpec, SessionState

_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    # starting -> exiting only when the spawn itself fails
    SessionState.STARTING: frozenset({SessionState.RUNNING, SessionState.EXITING}),
    SessionState.RUNNING: frozenset({SessionState.EXITING}),
    SessionState.EXITING: frozenset({SessionState.CLEANED}),
    SessionState.CLEANED: frozenset(),
}


class SessionLifecycle:
    """Owns the container and volumes of one session from spawn to cleanup."""

    def __init__(self, ctx: SessionContext, spec: LaunchSpec, cli: str) -> None:
        self.ctx = ctx
        self.spec = spec
        self.cli = cli
        self.state = SessionState.STARTING
        self.stop_result: CleanupResult | None = None
        self.cleanup_results: list[CleanupResult] = []

    def _transition(self, new_state: SessionState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid session transition {self.state.value} -> {new_state.value}"
            )
        self.ctx.log.debug("Session state", previous=self.state.value, state=new_state.value)
        self.state = new_state

    def mark_running(self) -> None:
        self._transition(SessionState.RUNNING)

    async def handle_signal(
        self, signal_name: str, proc: asyncio.subprocess.Process | None = None
    ) -> None:
        """Stop the container in response to SIGINT/SIGTERM.

        Volume cleanup is left to :meth:`handle_exit`, which runs once the
        stopped container's client process exits.
        """
        if self.state is not SessionState.RUNNING:
            self.ctx.log.info("Session already stopping", signal=signal_name)
            return
        self._transition(SessionState.EXITING)
        self.ctx.log.info(
            "Stopping container...", signal=signal_name, container=self.spec.container_name
        )

        timeouts = self.ctx.settings.timeouts
        result = await stop_container(
            self.cli,
            self.spec.container_name,
            grace=timeouts.stop_grace,
            timeout=timeouts.stop,
        )
        self.stop_result = result
        if result.ok:
            return

        self.ctx.log.warning("Failed to stop container gracefully", reason=result.warning.reason)
        # Kill the local client so the exit path still runs
        if proc is not None and proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()

    async def handle_exit(self, exit_code: int) -> list[CleanupResult]:
        """Run cleanup after the container's client process exited.

        Safe to call more than once; later calls return the first results.
        """
        if self.state is SessionState.CLEANED:
            return self.cleanup_results
        if self.state is not SessionState.EXITING:
            self._transition(SessionState.EXITING)

        if exit_code == 0:
            self.ctx.log.info("Session completed successfully")
        else:
            self.ctx.log.error("Session ended with non-zero exit code", exit_code=exit_code)

        return await self._cleanup()

    async def abort(self) -> list[CleanupResult]:
        """Clean up after a spawn that never produced a running container."""
        if self.state is SessionState.CLEANED:
            return self.cleanup_results
        if self.state is not SessionState.EXITING:
            self._transition(SessionState.EXITING)
        return await self._cleanup()

    async def _cleanup(self) -> list[CleanupResult]:
        timeout = self.ctx.settings.timeouts.volume_rm
        results: list[CleanupResult] = []
        for volume in self.spec.volumes.names():
            result = await remove_volume(self.cli, volume, timeout=timeout)
            if result.ok:
                self.ctx.log.info("Cleaned up temporary volume", volume=volume)
            else:
                self.ctx.log.warning(
                    "Failed to clean up volume", volume=volume, reason=result.warning.reason
                )
            results.append(result)

        self.cleanup_results = results
        self._transition(SessionState.CLEANED)
        return results
