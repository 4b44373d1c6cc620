"""Application lifecycle — run phases and signal handling.

Phases (see :func:`run_app`):
1. Requirement checks (engine, daemon, git, SSH agent)
2. Repository reference from host git metadata (validated)
3. Config discovery
4. Image build if missing
5. Launch spec + session run
"""

from __future__ import annotations

import asyncio
import contextlib
import signal

from agentbox.container_runner import build_launch_spec, ensure_image, run_session
from agentbox.context import SessionContext
from agentbox.discovery import find_tool_configs
from agentbox.errors import SessionCancelled
from agentbox.git_ops import read_repository_reference
from agentbox.runtime import get_runtime
from agentbox.system_checks import check_requirements

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _raise_if_cancelled(ctx: SessionContext) -> None:
    if ctx.cancelled.is_set():
        raise SessionCancelled(f"Cancelled by {ctx.signal_name}")


def _install_signal_handlers(ctx: SessionContext) -> None:
    loop = asyncio.get_running_loop()
    for sig in _SIGNALS:
        loop.add_signal_handler(sig, ctx.cancel, sig.name)


def _remove_signal_handlers() -> None:
    loop = asyncio.get_running_loop()
    for sig in _SIGNALS:
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.remove_signal_handler(sig)


async def run_app(ctx: SessionContext | None = None) -> int:
    """Run one session end to end.  Returns the container's exit code.

    Blocking phases run in a worker thread so the loop stays free to
    handle SIGINT/SIGTERM; cancellation is checked after each one.
    """
    ctx = ctx or SessionContext()
    _install_signal_handlers(ctx)
    try:
        ctx.log.info("Starting agentbox...")
        runtime = get_runtime()
        agent_socket = await asyncio.to_thread(check_requirements, ctx, runtime)
        _raise_if_cancelled(ctx)

        repo = await asyncio.to_thread(
            read_repository_reference, timeout=ctx.settings.timeouts.check
        )
        _raise_if_cancelled(ctx)
        ctx.log.info("Repository detected", repository=repo.name, branch=repo.branch)

        discovery = find_tool_configs(ctx)
        image = await asyncio.to_thread(ensure_image, ctx, runtime)
        _raise_if_cancelled(ctx)

        spec = build_launch_spec(ctx, repo, discovery, image, agent_socket)
        return await run_session(ctx, spec, runtime)
    finally:
        _remove_signal_handlers()


def run_build(ctx: SessionContext | None = None) -> None:
    """Rebuild the image from the bundled recipe."""
    ctx = ctx or SessionContext()
    runtime = get_runtime()
    timeout = ctx.settings.timeouts.check
    runtime.version(timeout)
    runtime.ensure_running(timeout)
    ensure_image(ctx, runtime, force=True)
