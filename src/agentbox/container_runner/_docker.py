"""Container engine CLI wrappers used during teardown.

Every call carries a timeout so a hung engine cannot wedge the session.
The async variants run the blocking call in a thread via
``asyncio.to_thread`` so signal handlers keep firing.
"""

from __future__ import annotations

import asyncio
import subprocess

from agentbox.errors import CleanupWarning
from agentbox.types import CleanupResult

_NO_SUCH_VOLUME = "no such volume"


def _run_engine_sync(
    cli: str,
    *args: str,
    check: bool = True,
    timeout: float = 30,
) -> subprocess.CompletedProcess[str]:
    """Run an engine CLI command (blocking — internal only)."""
    return subprocess.run(
        [cli, *args],
        capture_output=True,
        text=True,
        timeout=timeout,
        check=check,
    )


async def run_engine(
    cli: str,
    *args: str,
    check: bool = True,
    timeout: float = 30,
) -> subprocess.CompletedProcess[str]:
    """Run an engine CLI command without blocking the event loop."""
    return await asyncio.to_thread(_run_engine_sync, cli, *args, check=check, timeout=timeout)


def _describe_failure(result: subprocess.CompletedProcess[str]) -> str:
    return result.stderr.strip() or f"exit code {result.returncode}"


async def stop_container(cli: str, name: str, *, grace: int, timeout: float) -> CleanupResult:
    """Ask the engine to stop a running container (SIGTERM, then SIGKILL after *grace*)."""
    try:
        result = await run_engine(cli, "stop", "-t", str(grace), name, check=False, timeout=timeout)
    except subprocess.TimeoutExpired:
        return CleanupResult(name, CleanupWarning(name, f"stop timed out after {timeout:g}s"))
    except (OSError, subprocess.SubprocessError) as exc:
        return CleanupResult(name, CleanupWarning(name, str(exc)))
    if result.returncode != 0:
        return CleanupResult(name, CleanupWarning(name, _describe_failure(result)))
    return CleanupResult(name)


async def remove_volume(cli: str, name: str, *, timeout: float) -> CleanupResult:
    """Remove a named volume.  An already-absent volume counts as removed."""
    try:
        result = await run_engine(cli, "volume", "rm", name, check=False, timeout=timeout)
    except subprocess.TimeoutExpired:
        return CleanupResult(name, CleanupWarning(name, f"volume rm timed out after {timeout:g}s"))
    except (OSError, subprocess.SubprocessError) as exc:
        return CleanupResult(name, CleanupWarning(name, str(exc)))
    if result.returncode == 0 or _NO_SUCH_VOLUME in result.stderr.lower():
        return CleanupResult(name)
    return CleanupResult(name, CleanupWarning(name, _describe_failure(result)))
