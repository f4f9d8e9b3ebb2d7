#!/usr/bin/env python3
"""Structured logging system for Pathfinder.

This module provides a structured logging system with:
- Multiple log levels (DEBUG, INFO, WARNING, ERROR)
- Structured context (key-value pairs)
- Console and rotating file handlers
- Thread-local context management

Example:
    >>> logger = Logger(level=LogLevel.INFO)
    >>> logger.info("Found by name", path="/data/config.json")
    >>> with logger.add_context(rule="directories"):
    ...     logger.error("Error walking through directory")
"""

import logging
import logging.handlers
import sys
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

from pathfinder.core.constants import Defaults


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50


class Logger:
    """Structured logger with context support.

    Context passed as keyword arguments (or pushed with ``add_context``) is
    appended to the message as ``key=value`` pairs, so every line that reports
    a failure names the path it concerns.
    """

    # Thread-local storage for context
    _context_stack = threading.local()

    def __init__(
        self,
        name: str = "pathfinder",
        level: Union[LogLevel, str] = LogLevel.INFO,
        handlers: Optional[List[logging.Handler]] = None,
        stream: Optional[TextIO] = None,
    ):
        """Initialize logger.

        Args:
            name: Logger name for identification
            level: Minimum log level to output
            handlers: Optional list of logging handlers
            stream: Stream for the default console handler (stdout if None)
        """
        self.name = name
        self.logger = logging.getLogger(name)

        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.set_level(level)

        if handlers is None:
            handlers = [self._create_console_handler(stream)]

        # Clear existing handlers and add new ones
        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

        # Prevent propagation to root logger
        self.logger.propagate = False

    def _create_console_handler(self, stream: Optional[TextIO] = None) -> logging.StreamHandler:
        """Create default console handler.

        Progress and error lines are meant to be read by the person running
        the tool, so the console format is the bare message.

        Args:
            stream: Output stream, defaults to stdout

        Returns:
            Configured console handler
        """
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def create_file_handler(
        self,
        filename: Union[str, Path],
        max_bytes: int = Defaults.LOG_MAX_BYTES,
        backup_count: int = Defaults.LOG_BACKUP_COUNT,
    ) -> logging.handlers.RotatingFileHandler:
        """Create rotating file handler.

        Args:
            filename: Path to log file
            max_bytes: Maximum size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured rotating file handler
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count
        )
        formatter = logging.Formatter(Defaults.LOG_FORMAT, datefmt=Defaults.LOG_DATE_FORMAT)
        handler.setFormatter(formatter)
        return handler

    def add_handler(self, handler: logging.Handler) -> None:
        """Add a new output handler."""
        self.logger.addHandler(handler)

    def close(self) -> None:
        """Flush and close all attached handlers."""
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level.

        Args:
            level: New log level (LogLevel or string)
        """
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.logger.setLevel(level)

    def _get_context(self) -> Dict[str, Any]:
        """Get current thread-local context.

        Returns:
            Combined context from all levels
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        context = {}
        for ctx in self._context_stack.stack:
            context.update(ctx)
        return context

    def _format_message(self, msg: str, context: Dict[str, Any]) -> str:
        """Format message with context.

        Args:
            msg: Log message
            context: Context dictionary

        Returns:
            Formatted message with context
        """
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    @contextmanager
    def add_context(self, **kwargs):
        """Context manager to add temporary context.

        Args:
            **kwargs: Key-value pairs to add to context

        Example:
            >>> with logger.add_context(root="/data"):
            ...     logger.info("Scanning")
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        self._context_stack.stack.append(kwargs)
        try:
            yield
        finally:
            self._context_stack.stack.pop()

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any]) -> None:
        if self.logger.isEnabledFor(level):
            combined_context = self._get_context()
            combined_context.update(context)
            formatted_msg = self._format_message(msg, combined_context)
            self.logger.log(level, formatted_msg, extra={"context": combined_context})

    def debug(self, msg: str, **context) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, msg, context)

    def error(self, msg: str, **context) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, msg, context)


# Global logger instance
_global_logger: Optional[Logger] = None


def get_logger(name: str = "pathfinder") -> Logger:
    """Get or create a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    global _global_logger
    if _global_logger is None or _global_logger.name != name:
        _global_logger = Logger(name=name)
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger to use globally
    """
    global _global_logger
    _global_logger = logger
