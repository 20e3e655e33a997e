"""Process-wide logging facade with a replaceable backend."""

from __future__ import annotations

import enum
import sys
from typing import IO, Any, Protocol


class LogLevel(enum.IntEnum):
    """How much to log; higher values log less."""

    ALL = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    OFF = 5


class _Logger(Protocol):
    def fatal(self, *args: Any) -> None: ...
    def fatalf(self, fmt: str, *args: Any) -> None: ...
    def error(self, *args: Any) -> None: ...
    def errorf(self, fmt: str, *args: Any) -> None: ...
    def warn(self, *args: Any) -> None: ...
    def warnf(self, fmt: str, *args: Any) -> None: ...
    def info(self, *args: Any) -> None: ...
    def infof(self, fmt: str, *args: Any) -> None: ...
    def debug(self, *args: Any) -> None: ...
    def debugf(self, fmt: str, *args: Any) -> None: ...
    def trace(self, *args: Any) -> None: ...
    def tracef(self, fmt: str, *args: Any) -> None: ...
    def set_log_level(self, level: LogLevel) -> None: ...
    def set_output(self, writer: IO[Any]) -> None: ...


class EmptyLogger:
    """Discards every message; fatal calls still exit with status 1.

    Nothing is ever written. The logger only keeps the settings it was given
    and a count of the messages it dropped.
    """

    def __init__(self) -> None:
        self.log_level: LogLevel = LogLevel.ALL
        self.output: IO[Any] | None = None
        self.discarded = 0

    def _drop(self) -> None:
        self.discarded += 1

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = LogLevel(level)

    def fatal(self, *args: Any) -> None:
        self._drop()
        sys.exit(1)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self._drop()
        sys.exit(1)

    def error(self, *args: Any) -> None:
        self._drop()

    def errorf(self, fmt: str, *args: Any) -> None:
        self._drop()

    def warn(self, *args: Any) -> None:
        self._drop()

    def warnf(self, fmt: str, *args: Any) -> None:
        self._drop()

    def info(self, *args: Any) -> None:
        self._drop()

    def infof(self, fmt: str, *args: Any) -> None:
        self._drop()

    def debug(self, *args: Any) -> None:
        self._drop()

    def debugf(self, fmt: str, *args: Any) -> None:
        self._drop()

    def trace(self, *args: Any) -> None:
        self._drop()

    def tracef(self, fmt: str, *args: Any) -> None:
        self._drop()

    def set_output(self, writer: IO[Any]) -> None:
        self.output = writer


_logger: _Logger = EmptyLogger()


def error(*args: Any) -> None:
    _logger.error(*args)


def errorf(fmt: str, *args: Any) -> None:
    _logger.errorf(fmt, *args)


def warn(*args: Any) -> None:
    _logger.warn(*args)


def warnf(fmt: str, *args: Any) -> None:
    _logger.warnf(fmt, *args)


def info(*args: Any) -> None:
    _logger.info(*args)


def infof(fmt: str, *args: Any) -> None:
    _logger.infof(fmt, *args)


def debug(*args: Any) -> None:
    _logger.debug(*args)


def debugf(fmt: str, *args: Any) -> None:
    _logger.debugf(fmt, *args)


def trace(*args: Any) -> None:
    _logger.trace(*args)


def tracef(fmt: str, *args: Any) -> None:
    _logger.tracef(fmt, *args)


def fatal(*args: Any) -> None:
    _logger.fatal(*args)


def fatalf(fmt: str, *args: Any) -> None:
    _logger.fatalf(fmt, *args)


def set_log_level(level: LogLevel) -> None:
    _logger.set_log_level(level)


def set_output(writer: IO[Any]) -> None:
    _logger.set_output(writer)


def register_logger(logger: _Logger) -> None:
    """Make ``logger`` the backend of every module-level call."""
    global _logger
    _logger = logger


def get_logger() -> _Logger:
    """Return the active backend."""
    return _logger