"""Centralized logging configuration for the ``fintrack`` package.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the
  package logger (``"fintrack"``). Entry points (the CLI) call it once.
- ``get_logger(name)`` returns a logger and makes sure the package logger has
  a ``NullHandler`` when nothing has been configured.

Library modules never attach their own handlers.
"""

import logging
import os
from typing import IO, Optional

from fintrack.config import LOG_LEVEL_ENV

_PKG_LOGGER_NAME = "fintrack"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured_handler: Optional[logging.Handler] = None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        raise ValueError(f"Unknown log level '{level}'")
    env_val = os.environ.get(LOG_LEVEL_ENV)
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure the package logger.

    Calling it again replaces the previously configured handler, so repeated
    CLI invocations in one process (tests) do not stack handlers.

    Args:
        level: Level as int or name. Falls back to FINTRACK_LOG_LEVEL, then WARNING.
        fmt: Optional format string
        stream: Output stream for the handler (defaults to the current stderr)
    """
    global _configured_handler

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler) or handler is _configured_handler:
            logger.removeHandler(handler)

    numeric_level = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(numeric_level)
    logger.addHandler(handler)
    logger.propagate = False
    _configured_handler = handler


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name with library-safe defaults."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _configured_handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
