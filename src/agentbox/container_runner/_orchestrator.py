"""Main entry point — spawns the session container and supervises it."""

from __future__ import annotations

import asyncio

from agentbox.container_runner._mounts import build_container_args
from agentbox.container_runner._process import SessionLifecycle
from agentbox.context import SessionContext
from agentbox.errors import LaunchError, SessionCancelled
from agentbox.runtime import RuntimeProvider
from agentbox.types import LaunchSpec


async def _supervise(
    ctx: SessionContext,
    proc: asyncio.subprocess.Process,
    lifecycle: SessionLifecycle,
) -> int:
    """Wait for the container to exit, stopping it first if a signal arrives."""
    exit_task = asyncio.ensure_future(proc.wait())
    signal_task = asyncio.ensure_future(ctx.cancelled.wait())
    try:
        done, _ = await asyncio.wait(
            {exit_task, signal_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if exit_task not in done:
            await lifecycle.handle_signal(ctx.signal_name or "signal", proc)
        return await exit_task
    finally:
        signal_task.cancel()


async def run_session(ctx: SessionContext, spec: LaunchSpec, runtime: RuntimeProvider) -> int:
    """Spawn the container attached to the terminal and own it until cleanup.

    Returns the container's exit code.  Teardown failures are logged and
    never change the returned code.
    """
    if ctx.cancelled.is_set():
        raise SessionCancelled("Cancelled before the container started")

    lifecycle = SessionLifecycle(ctx, spec, runtime.cli)
    container_args = build_container_args(spec)

    ctx.log.info(
        "Starting container with secure credential forwarding...",
        container=spec.container_name,
        repository=spec.env.get("REPO_NAME"),
        branch=spec.env.get("REPO_BRANCH"),
        mount_count=len(spec.mounts),
    )

    # stdin/stdout/stderr inherited: the tool inside is interactive
    try:
        proc = await asyncio.create_subprocess_exec(runtime.cli, *container_args)
    except OSError as exc:
        await lifecycle.abort()
        raise LaunchError(f"Failed to run container: {exc}") from exc

    lifecycle.mark_running()
    exit_code = await _supervise(ctx, proc, lifecycle)
    await lifecycle.handle_exit(exit_code)
    return exit_code
