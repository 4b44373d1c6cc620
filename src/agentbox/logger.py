"""Structured logging singleton for operator-facing output.

Configured from the environment at import time (``AGENTBOX_LOG_LEVEL``,
then ``LOG_LEVEL``) so that configuration errors can themselves be logged.
:func:`set_level` re-applies the level once Settings has loaded.

Output goes to stderr; stdout and stdin belong to the container session.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

_LEVEL_ENV_VARS = ("AGENTBOX_LOG_LEVEL", "LOG_LEVEL")


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


def _use_colors() -> bool:
    # https://no-color.org
    return sys.stderr.isatty() and "NO_COLOR" not in os.environ


def _setup_logging() -> structlog.stdlib.BoundLogger:
    level_name = next((os.environ[v] for v in _LEVEL_ENV_VARS if os.environ.get(v)), "INFO")
    level = _resolve_level(level_name)

    # Root logger first: structlog's filter_by_level reads its level
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(colors=_use_colors()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("agentbox")


logger = _setup_logging()


def set_level(level_name: str) -> None:
    """Apply the configured level to the root logger."""
    logging.getLogger().setLevel(_resolve_level(level_name))


def _uncaught_exception_handler(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_tb: object,
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)  # type: ignore[arg-type]
        return
    logger.critical("Unexpected internal error", exc_info=(exc_type, exc_value, exc_tb))
    sys.exit(1)


sys.excepthook = _uncaught_exception_handler
