"""Container runtime abstraction."""

from agentbox.runtime.runtime import (
    CliContainerRuntime,
    RuntimeProvider,
    detect_runtime,
    get_runtime,
    reset_runtime,
)

__all__ = [
    "CliContainerRuntime",
    "RuntimeProvider",
    "detect_runtime",
    "get_runtime",
    "reset_runtime",
]
