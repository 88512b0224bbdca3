"""Logging setup for the menu launcher and its command line front end."""

from __future__ import annotations

import logging as py_logging
import os
import sys
from pathlib import Path
from typing import TextIO

LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
LOG_LEVEL_ENV = "SSHMENU_LOG_LEVEL"
DEFAULT_LOG_PATH = Path("~/.config/sshmenu/logs/sshmenu.log")
_FALLBACK_LOG_PATH = Path(".sshmenu/logs/sshmenu.log")
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def default_log_path() -> Path:
    try:
        resolved = DEFAULT_LOG_PATH.expanduser()
    except RuntimeError:
        return (Path.cwd() / _FALLBACK_LOG_PATH).resolve()
    return resolved if resolved.is_absolute() else resolved.resolve()


def resolve_level(level: str | None) -> int:
    """Map a level name (``warning`` is accepted as ``WARN``) to a logging level.

    The ``SSHMENU_LOG_LEVEL`` environment variable is used when no level is
    given; unknown names fall back to WARN so the menu stays quiet.
    """
    name = (level or os.getenv(LOG_LEVEL_ENV, "") or "WARN").strip().upper()
    if name == "WARNING":
        name = "WARN"
    return LOG_LEVELS.get(name, py_logging.WARNING)


def _file_handler(log_file: str | Path, formatter: py_logging.Formatter) -> py_logging.Handler | None:
    try:
        log_path = Path(log_file).expanduser()
    except RuntimeError:
        log_path = Path(log_file)
    if not log_path.is_absolute():
        log_path = log_path.resolve()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = py_logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return None
    handler.setLevel(py_logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: str | None = None,
    stream: TextIO | None = None,
    *,
    log_file: str | Path | None = None,
) -> py_logging.Logger:
    resolved = resolve_level(level)
    logger = py_logging.getLogger("sshmenu")
    logger.setLevel(py_logging.DEBUG if log_file else resolved)
    logger.handlers.clear()
    formatter = py_logging.Formatter(_FORMAT)

    console = py_logging.StreamHandler(stream or sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = _file_handler(log_file, formatter)
        if file_handler is not None:
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger
