"""Logging setup for the regsync CLI."""

from __future__ import annotations

import logging
import os

from .errors import ConfigurationError

# HTTP and migration chatter stays at WARNING or above.
_QUIET_LOGGERS = ("httpx", "httpcore", "alembic.runtime.migration")


def resolve_log_level(value: str | None) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant. ``None`` is INFO."""

    if value is None or not value.strip():
        return logging.INFO
    level = logging.getLevelNamesMapping().get(value.strip().upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level: {value!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger with a terse format on stderr.

    ``level`` defaults to ``REGSYNC_LOG_LEVEL`` (INFO when unset). Pass
    ``force=True`` to replace handlers installed earlier.
    """

    effective_level = level if level is not None else resolve_log_level(
        os.getenv("REGSYNC_LOG_LEVEL")
    )
    logging.basicConfig(
        level=effective_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(effective_level, logging.WARNING))
