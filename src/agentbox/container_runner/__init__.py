"""Container runner — builds the launch spec and owns the session container.

This package is split into focused submodules:
  _docker        — bounded engine CLI wrappers (stop, volume rm)
  _image         — image existence check and on-demand build
  _credentials   — SSH agent forwarding and identity mounts
  _mounts        — config staging mounts and LaunchSpec -> CLI args
  _launch        — session naming and LaunchSpec construction
  _process       — session lifecycle state machine and cleanup
  _orchestrator  — spawn and supervision (run_session)
"""

from agentbox.container_runner._image import ensure_image
from agentbox.container_runner._launch import build_launch_spec, new_session_id
from agentbox.container_runner._mounts import build_container_args
from agentbox.container_runner._orchestrator import run_session
from agentbox.container_runner._process import SessionLifecycle

__all__ = [
    "SessionLifecycle",
    "build_container_args",
    "build_launch_spec",
    "ensure_image",
    "new_session_id",
    "run_session",
]
