# === FILE: sitefetch/logger.py ===
"""Logging setup for sitefetch.

Every module logs through a child of the ``sitefetch`` logger::

    from sitefetch.logger import get_logger
    log = get_logger("crawler")      # -> "sitefetch.crawler"

Records go to *stderr* (stdout carries the text report) and optionally to a
rotating log file. The CLI calls :func:`configure` once with the user's
``--log-level``, ``--log-file`` and ``--silent`` choices.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "sitefetch"

#: level above CRITICAL, mutes every record
SILENT: Final[int] = logging.CRITICAL + 10

_LevelT = Union[int, str]


def _stderr_handler(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _file_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
    silent: bool = False,
) -> logging.Logger:
    """Set level and handlers of the ``sitefetch`` logger and return it.

    ``silent`` wins over ``level``. With ``replace_handlers`` the handlers of a
    previous call are closed first, so repeated CLI invocations in one process
    do not duplicate output or leak file handles.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(SILENT if silent else level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    lg.addHandler(_stderr_handler(log_format))
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        lg.addHandler(_file_handler(log_file, log_format))

    lg.propagate = False
    return lg


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(LOGGER_NAME if not name else f"{LOGGER_NAME}.{name}")


logger: logging.Logger = configure()

__all__ = ["logger", "configure", "get_logger", "SILENT", "LOGGER_NAME"]
