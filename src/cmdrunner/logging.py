"""Logging infrastructure for cmdrunner.

Provides the Logger interface injected into every component that reports
progress, plus the LogLevel verbosity scale.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod


class LogLevel(enum.Enum):
    """Log verbosity levels for cmdrunner diagnostic messages.

    Lower numeric values represent higher severity / less verbosity.
    """
    FATAL = 0  # Only unrecoverable errors (unreadable task files)
    ERROR = 1  # Fatal errors plus task execution failures
    WARN = 2   # Errors plus skipped (malformed) task files
    INFO = 3   # Warnings plus normal progress (default)
    DEBUG = 4  # Info plus selected projects, resolved macro values
    TRACE = 5  # Debug plus every variable map applied


class Logger(ABC):
    """Interface for leveled, stack-managed loggers."""

    @abstractmethod
    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        """Log a message if `level` passes the current threshold."""
        ...

    @abstractmethod
    def push_level(self, level: LogLevel) -> None:
        """Temporarily switch to a new log level."""
        ...

    @abstractmethod
    def pop_level(self) -> LogLevel:
        """Return to the previous log level."""
        ...

    def fatal(self, *args, **kwargs) -> None:
        self.log(LogLevel.FATAL, *args, **kwargs)

    def error(self, *args, **kwargs) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def warn(self, *args, **kwargs) -> None:
        self.log(LogLevel.WARN, *args, **kwargs)

    def info(self, *args, **kwargs) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def debug(self, *args, **kwargs) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def trace(self, *args, **kwargs) -> None:
        self.log(LogLevel.TRACE, *args, **kwargs)
