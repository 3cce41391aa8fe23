# quantum/logging.py
"""Logger factory for the simulator.

Every module asks for its logger with ``get_logger(__name__)``; loggers live
under the ``quantum.`` namespace and write to stderr.
"""
import logging
import sys
from typing import Dict, Optional, Union

from .settings import DEFAULT_LOG_LEVEL

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_level = getattr(logging, DEFAULT_LOG_LEVEL, logging.WARNING)
_loggers: Dict[str, logging.Logger] = {}
_handlers: Dict[str, logging.Handler] = {}


def _resolve(level: Union[int, str]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached logger for ``name`` (usually ``__name__``).

    A single stderr handler is attached the first time a logger is created,
    and propagation to the root logger is turned off so embedding
    applications do not see duplicate lines.
    """
    if name is None:
        name = "quantum"
    logger_name = name if name.startswith("quantum") else f"quantum.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_level)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_level)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        _handlers[logger_name] = handler

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Set the level of every simulator logger, current and future."""
    global _level
    _level = _resolve(level)
    for logger in _loggers.values():
        logger.setLevel(_level)
    for handler in _handlers.values():
        handler.setLevel(_level)
