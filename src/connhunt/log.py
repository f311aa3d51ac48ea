"""Logging configuration for the connhunt command-line tool.

The engine modules only create module-level loggers. A ``NullHandler`` sits on
the package logger so importing connhunt never prints anything on its own;
:func:`configure_logging` is called by the CLI to attach a console handler and
an appending log file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

PACKAGE_LOGGER_NAME = "connhunt"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S%z"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Optional[TextIO] = None,
    log_file: Optional[Path | str] = None,
    fmt: str = LOG_FORMAT,
    datefmt: str = DATE_FORMAT,
) -> logging.Logger:
    """Attach a console handler and, optionally, an appending file handler.

    Handlers installed by a previous call are replaced, so calling this twice
    in one process (tests, repeated ``main()`` calls) does not duplicate
    output.

    Args:
        level: Logging level or level name. Defaults to ``INFO``.
        stream: Console stream; defaults to ``sys.stderr``.
        log_file: Optional path of a log file opened in append mode.
        fmt: Record format shared by both handlers.
        datefmt: Timestamp format shared by both handlers.

    Returns:
        The configured package logger.
    """

    logger = get_logger()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)
    reset_logging()

    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)
    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file is not None:
        path = Path(log_file)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, mode="a", encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        handler._connhunt_managed = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def reset_logging() -> None:
    """Remove handlers installed by :func:`configure_logging`."""

    logger = get_logger()
    for handler in list(logger.handlers):
        if getattr(handler, "_connhunt_managed", False):
            logger.removeHandler(handler)
            handler.close()


__all__ = ["PACKAGE_LOGGER_NAME", "configure_logging", "get_logger", "reset_logging"]
