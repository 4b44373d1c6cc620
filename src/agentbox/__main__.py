"""Entry point for `python -m agentbox` / the `agentbox` console script.

Subcommands:
    agentbox            Start a session for the current repository (default)
    agentbox build      Rebuild the container image
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import pydantic

from agentbox import __version__

_DESCRIPTION = """\
Run opencode against the current git repository inside a disposable,
least-privilege container.  The repository is cloned fresh into the
container; your SSH agent is forwarded for git access and no keys are
copied."""

_EPILOG = """\
Requirements:
  - Docker (or Podman) installed and running
  - Current directory is a git repository with an 'origin' remote
  - SSH agent running with your keys loaded (ssh-add)

Example:
  cd /path/to/your/git/project
  agentbox"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentbox",
        description=_DESCRIPTION,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"agentbox version {__version__}",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("build", help="Rebuild the container image from the bundled recipe")
    return parser


def _run() -> int:
    from agentbox._lifecycle import run_app

    return asyncio.run(run_app())


def _build() -> int:
    from agentbox._lifecycle import run_build

    run_build()
    return 0


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    # Imported after parsing so --help/--version never touch config
    from agentbox.config import get_settings
    from agentbox.errors import AgentboxError
    from agentbox.logger import logger, set_level

    try:
        set_level(get_settings().logging.level)
    except pydantic.ValidationError as exc:
        logger.error("Invalid agentbox configuration", errors=exc.errors(include_url=False))
        sys.exit(1)

    try:
        match args.command:
            case "build":
                exit_code = _build()
            case _:
                exit_code = _run()
    except AgentboxError as exc:
        logger.error(str(exc))
        if exc.hint:
            logger.info(exc.hint)
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
