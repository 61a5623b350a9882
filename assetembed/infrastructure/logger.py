#!/usr/bin/env python3
"""Structured logging for assetembed runs.

Messages carry key=value context, rendered after a ``|`` separator:

    Accepted file | pipeline=WEB path=js/app.js uri=/js/app.js

Context pushed with ``add_context`` applies to every message logged inside
the block, which is how per-pipeline messages are tagged. Console output goes
to stderr; stdout belongs to the watch signal.

Example:
    >>> logger = Logger(level="DEBUG")
    >>> with logger.add_context(pipeline="ASSETS"):
    ...     logger.debug("Accepted file", path="a.txt")
"""

import logging
import logging.handlers
from contextlib import contextmanager
from contextvars import ContextVar
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotation limits for --log-file
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_context: ContextVar[Tuple[Dict[str, Any], ...]] = ContextVar("assetembed_log_context", default=())


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, level: Union["LogLevel", str]) -> "LogLevel":
        """Resolve a level given by name, case-insensitively.

        Raises:
            ValueError: If the name is not a known level
        """
        if isinstance(level, cls):
            return level
        try:
            return cls[str(level).upper()]
        except KeyError:
            names = ", ".join(member.name for member in cls)
            raise ValueError(f"Unknown log level {level!r}, expected one of {names}") from None


def format_context(msg: str, context: Dict[str, Any]) -> str:
    """Append key=value pairs to a message."""
    if not context:
        return msg
    pairs = " ".join(f"{key}={value}" for key, value in context.items())
    return f"{msg} | {pairs}"


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


class Logger:
    """Structured logger with context support."""

    def __init__(
        self,
        name: str = "assetembed",
        level: Union[LogLevel, str] = LogLevel.INFO,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Replaces any handlers left on the underlying logging.Logger by a
        previous instance with the same name.

        Args:
            name: Logger name
            level: Minimum level, as LogLevel or level name
            handlers: Handlers to install (default: one stderr handler)

        Raises:
            ValueError: If level is not a known level name
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        self.set_level(level)

        if handlers is None:
            console = logging.StreamHandler()
            console.setFormatter(_formatter())
            handlers = [console]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

    def log_to_file(self, filename: Union[str, Path]) -> logging.Handler:
        """Also write records to a rotating log file.

        Args:
            filename: Path to the log file

        Returns:
            The installed handler
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        )
        handler.setFormatter(_formatter())
        self.logger.addHandler(handler)
        return handler

    def set_level(self, level: Union[LogLevel, str]) -> None:
        self.logger.setLevel(LogLevel.parse(level))

    def get_level(self) -> LogLevel:
        return LogLevel(self.logger.level)

    @contextmanager
    def add_context(self, **kwargs: Any) -> Iterator[None]:
        """Attach context to every message logged inside the block.

        Example:
            >>> with logger.add_context(pipeline="ASSETS"):
            ...     logger.info("Rendered pipeline", records=3)
        """
        token = _context.set(_context.get() + (kwargs,))
        try:
            yield
        finally:
            _context.reset(token)

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return

        combined: Dict[str, Any] = {}
        for frame in _context.get():
            combined.update(frame)
        combined.update(context)

        self.logger.log(level, format_context(msg, combined), extra={"context": combined})

    def debug(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, msg, context)

    def error(self, msg: str, **context: Any) -> None:
        self._log(LogLevel.ERROR, msg, context)


_global_logger: Optional[Logger] = None


def get_logger(name: str = "assetembed") -> Logger:
    """Get the global logger, creating a default one if needed."""
    global _global_logger
    if _global_logger is None or _global_logger.name != name:
        _global_logger = Logger(name=name)
    return _global_logger


def set_global_logger(logger: Optional[Logger]) -> None:
    """Install the global logger, or reset it with None."""
    global _global_logger
    _global_logger = logger
