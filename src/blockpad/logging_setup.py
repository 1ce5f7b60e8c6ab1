"""Logging configuration for blockpad.

Library modules only ever call ``logging.getLogger(__name__)``; the host
application decides whether to call :func:`configure_logging`.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .settings import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_MARKER = "_blockpad_handler"


def configure_logging(
    level: str | None = None,
    log_path: Path | None = None,
) -> logging.Logger:
    """Attach stream (and optionally rotating file) handlers to the package logger.

    Calling this more than once replaces the handlers it installed earlier.

    Args:
        level: Log level name. Defaults to settings.log_level.
        log_path: File to log to. Defaults to settings.log_path (no file if unset).

    Returns:
        The configured ``blockpad`` logger.
    """
    logger = logging.getLogger("blockpad")
    logger.setLevel((level or settings.log_level).upper())

    for handler in list(logger.handlers):
        if getattr(handler, _MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    setattr(stream_handler, _MARKER, True)
    logger.addHandler(stream_handler)

    path = log_path or settings.log_path
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        setattr(file_handler, _MARKER, True)
        logger.addHandler(file_handler)

    return logger
