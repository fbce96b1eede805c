"""Shared logging configuration for the reactions API process."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")


def configure_logging(*, level: str) -> None:
    """Configure root logging once with the runtime level.

    SQL echo loggers stay at WARNING unless the runtime level is DEBUG.
    """

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)

    logging.basicConfig(
        level=resolved_level,
        format=_LOG_FORMAT,
    )
    if resolved_level > logging.DEBUG:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
