"""Logging utilities for qalgebra.

Every module logs through ``get_logger(__name__)``. All qalgebra loggers share
one output configuration (level, stream and format) that ``configure_logging``
replaces and that loggers created later pick up as well.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_PACKAGE = "qalgebra"

_level: int = logging.WARNING
_format: str = "[%(levelname)s] %(name)s: %(message)s"
_stream: Optional[TextIO] = None

_loggers: dict[str, logging.Logger] = {}


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _attach_handler(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr if _stream is None else _stream)
    handler.setLevel(_level)
    handler.setFormatter(logging.Formatter(_format))
    logger.addHandler(handler)
    logger.setLevel(_level)
    logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a qalgebra logger.

    Names outside the package are prefixed with ``qalgebra.``; ``__name__`` of
    a qalgebra module is used as is. Loggers are cached, so each one carries a
    single handler no matter how often it is requested.

    Args:
        name: Logger name, typically ``__name__``. If None, returns the
            package logger.

    Returns:
        Configured logger instance.

    Example:
        >>> from qalgebra.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("Canonicalizing term")
    """
    if name is None or name == _PACKAGE or name.startswith(_PACKAGE + "."):
        logger_name = name or _PACKAGE
    else:
        logger_name = f"{_PACKAGE}.{name}"

    logger = _loggers.get(logger_name)
    if logger is None:
        logger = logging.getLogger(logger_name)
        _attach_handler(logger)
        _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of all qalgebra loggers, existing and future.

    Args:
        level: Logging level (logging.DEBUG, logging.INFO, etc.) or its name.
    """
    global _level
    _level = _resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(_level)
        for handler in logger.handlers:
            handler.setLevel(_level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Replace the output configuration of all qalgebra loggers.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format. Defaults to ``[LEVEL] name: message``.
        stream: Output stream (default: sys.stderr).
    """
    global _level, _format, _stream
    _level = _resolve_level(level)
    _format = format_string or "[%(levelname)s] %(name)s: %(message)s"
    _stream = stream
    for logger in _loggers.values():
        _attach_handler(logger)
