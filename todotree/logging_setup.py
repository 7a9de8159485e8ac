"""Logging configuration for the CLI.

The TUI owns the terminal, so records only go to a file when one is requested.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_TAG = "_todotree_handler"


def configure_logging(log_file: Path | None = None, level: str = "INFO") -> logging.Logger:
    """Attach one handler to the package logger, replacing a previous one.

    Without ``log_file`` a ``NullHandler`` is installed so nothing reaches
    stderr while the terminal is in raw mode.
    """
    logger = logging.getLogger("todotree")
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    handler: logging.Handler
    if log_file is None:
        handler = logging.NullHandler()
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_TAG, True)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    return logger
