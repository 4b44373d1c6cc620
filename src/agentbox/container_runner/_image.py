"""Image builder — make sure the session image exists, building it on demand."""

from __future__ import annotations

import os
import subprocess

from agentbox.context import SessionContext
from agentbox.errors import BuildError
from agentbox.runtime import RuntimeProvider


def image_exists(ctx: SessionContext, runtime: RuntimeProvider, image: str) -> bool:
    timeout = ctx.settings.timeouts.check
    try:
        result = subprocess.run(
            [runtime.cli, "image", "inspect", image],
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise BuildError(f"Timed out after {timeout:g}s querying image '{image}'") from exc
    except OSError as exc:
        raise BuildError(f"Failed to query image '{image}': {exc}") from exc
    return result.returncode == 0


def build_image(ctx: SessionContext, runtime: RuntimeProvider, image: str) -> None:
    """Build *image* from the bundled recipe, streaming output to the terminal."""
    s = ctx.settings
    context_dir = s.build_context_dir
    dockerfile = context_dir / "Dockerfile"
    if not dockerfile.is_file():
        raise BuildError(f"Container image '{image}' not found and no Dockerfile at {dockerfile}")

    ctx.log.info("Building container image...", image=image, context=str(context_dir))
    env = {**os.environ, "DOCKER_BUILDKIT": "1"}
    try:
        build = subprocess.run(
            [runtime.cli, "build", "-t", image, str(context_dir)],
            cwd=str(context_dir),
            env=env,
            timeout=s.timeouts.build,
        )
    except subprocess.TimeoutExpired as exc:
        raise BuildError(
            f"Image build timed out after {s.timeouts.build:g}s",
            hint="Raise [timeouts].build in the agentbox config if builds are slow",
        ) from exc
    except OSError as exc:
        raise BuildError(f"Failed to run image build: {exc}") from exc

    if build.returncode != 0:
        raise BuildError(f"Failed to build container image '{image}'")
    ctx.log.info("Container image built successfully", image=image)


def ensure_image(ctx: SessionContext, runtime: RuntimeProvider, *, force: bool = False) -> str:
    """Return the image handle, building the image first if it is missing.

    With ``force`` the image is rebuilt even when present.
    """
    image = ctx.settings.container.image
    if not force and image_exists(ctx, runtime, image):
        ctx.log.info("Container image already exists, skipping build", image=image)
        return image
    build_image(ctx, runtime, image)
    return image
