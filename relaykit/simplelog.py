"""Minimal levelled logger writing timestamped lines to standard error."""

from __future__ import annotations

import re
import sys
import time
from typing import IO, Any

from relaykit.log import LogLevel

_VERB = re.compile(r"%[+#]?v")


def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
    if not args:
        return fmt
    try:
        return _VERB.sub("%s", fmt) % args
    except (TypeError, ValueError):
        return fmt + "%!(EXTRA " + ", ".join(str(arg) for arg in args) + ")"


def _print(message: str) -> None:
    if not message.endswith("\n"):
        message += "\n"
    sys.stderr.write(time.strftime("%Y/%m/%d %H:%M:%S ") + message)
    sys.stderr.flush()


def _println(args: tuple[Any, ...]) -> None:
    _print(" ".join(str(arg) for arg in args))


class SimpleLogger:
    """Logger that prints every enabled message to standard error."""

    def __init__(self) -> None:
        self.log_level = LogLevel.ALL
        self.requested_output: IO[Any] | None = None

    def set_log_level(self, level: LogLevel | int) -> None:
        self.log_level = LogLevel(level)

    def fatal(self, *args: Any) -> None:
        if self.log_level <= LogLevel.FATAL:
            _println(args)
        sys.exit(1)

    def fatalf(self, fmt: str, *args: Any) -> None:
        if self.log_level <= LogLevel.FATAL:
            _print(_sprintf(fmt, args))
        sys.exit(1)

    def error(self, *args: Any) -> None:
        if self.log_level <= LogLevel.ERROR:
            _println(args)

    def errorf(self, fmt: str, *args: Any) -> None:
        if self.log_level <= LogLevel.ERROR:
            _print(_sprintf(fmt, args))

    def warn(self, *args: Any) -> None:
        if self.log_level <= LogLevel.WARN:
            _println(args)

    def warnf(self, fmt: str, *args: Any) -> None:
        if self.log_level <= LogLevel.WARN:
            _print(_sprintf(fmt, args))

    def info(self, *args: Any) -> None:
        if self.log_level <= LogLevel.INFO:
            _println(args)

    def infof(self, fmt: str, *args: Any) -> None:
        if self.log_level <= LogLevel.INFO:
            _print(_sprintf(fmt, args))

    def debug(self, *args: Any) -> None:
        if self.log_level <= LogLevel.ALL:
            _println(args)

    def debugf(self, fmt: str, *args: Any) -> None:
        if self.log_level <= LogLevel.ALL:
            _print(_sprintf(fmt, args))

    def trace(self, *args: Any) -> None:
        if self.log_level <= LogLevel.ALL:
            _println(args)

    def tracef(self, fmt: str, *args: Any) -> None:
        if self.log_level <= LogLevel.ALL:
            _print(_sprintf(fmt, args))

    def set_output(self, writer: IO[Any]) -> None:
        """Remember the requested writer; output still goes to standard error."""
        self.requested_output = writer