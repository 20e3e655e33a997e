"""Colourful, levelled logger writing one line per message."""

from __future__ import annotations

import inspect
import io
import os
import re
import sys
import threading
import time
from dataclasses import dataclass
from typing import IO, Any

from relaykit import colorful
from relaykit.colorful import ColorBuffer
from relaykit.log import LogLevel


@dataclass(frozen=True)
class Prefix:
    """Level tag in plain and coloured form, and whether to show the caller."""

    plain: bytes
    color: bytes
    file: bool = False


_PLAIN_FATAL = b"[FATAL] "
_PLAIN_ERROR = b"[ERROR] "
_PLAIN_WARN = b"[WARN]  "
_PLAIN_INFO = b"[INFO]  "
_PLAIN_DEBUG = b"[DEBUG] "
_PLAIN_TRACE = b"[TRACE] "

FATAL_PREFIX = Prefix(_PLAIN_FATAL, colorful.red(_PLAIN_FATAL), True)
ERROR_PREFIX = Prefix(_PLAIN_ERROR, colorful.red(_PLAIN_ERROR), True)
WARN_PREFIX = Prefix(_PLAIN_WARN, colorful.orange(_PLAIN_WARN))
INFO_PREFIX = Prefix(_PLAIN_INFO, colorful.green(_PLAIN_INFO))
DEBUG_PREFIX = Prefix(_PLAIN_DEBUG, colorful.purple(_PLAIN_DEBUG), True)
TRACE_PREFIX = Prefix(_PLAIN_TRACE, colorful.cyan(_PLAIN_TRACE))

_VERB = re.compile(r"%[+#]?v")


def _sprintln(args: tuple[Any, ...]) -> str:
    return " ".join(str(arg) for arg in args) + "\n"


def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
    if not args:
        return fmt
    try:
        return _VERB.sub("%s", fmt) % args
    except (TypeError, ValueError):
        return fmt + "%!(EXTRA " + ", ".join(str(arg) for arg in args) + ")"


def _isatty(writer: Any) -> bool:
    try:
        return bool(writer.isatty())
    except (AttributeError, ValueError, OSError):
        return False


class Logger:
    """Logger with optional colour, timestamps and caller information."""

    def __init__(self, out: IO[Any] | None = None) -> None:
        if out is None:
            out = sys.stdout
        self._lock = threading.Lock()
        self._color = _isatty(out)
        self._out = out
        self._debug = False
        self._timestamp = True
        self._quiet = False
        self._buf = ColorBuffer()
        self._log_level = int(LogLevel.ALL)

    def set_log_level(self, level: LogLevel | int) -> None:
        with self._lock:
            self._log_level = int(level)

    def set_output(self, writer: IO[Any]) -> None:
        """Send output to ``writer``; colour is used only if it is a terminal."""
        with self._lock:
            self._color = _isatty(writer)
            self._out = writer

    def with_color(self) -> "Logger":
        with self._lock:
            self._color = True
        return self

    def without_color(self) -> "Logger":
        with self._lock:
            self._color = False
        return self

    def with_debug(self) -> "Logger":
        with self._lock:
            self._debug = True
        return self

    def without_debug(self) -> "Logger":
        with self._lock:
            self._debug = False
        return self

    def is_debug(self) -> bool:
        with self._lock:
            return self._debug

    def with_timestamp(self) -> "Logger":
        with self._lock:
            self._timestamp = True
        return self

    def without_timestamp(self) -> "Logger":
        with self._lock:
            self._timestamp = False
        return self

    def quiet(self) -> "Logger":
        with self._lock:
            self._quiet = True
        return self

    def no_quiet(self) -> "Logger":
        with self._lock:
            self._quiet = False
        return self

    def is_quiet(self) -> bool:
        with self._lock:
            return self._quiet

    def output(self, depth: int, prefix: Prefix, data: str) -> None:
        """Write one line; ``depth`` selects the caller frame that is reported."""
        if self.is_quiet():
            return
        now = time.localtime()
        fn = file = ""
        line = 0
        if prefix.file:
            frame = inspect.currentframe()
            for _ in range(depth + 2):
                frame = frame.f_back if frame is not None else None
            if frame is None:
                file, fn, line = "<unknown file>", "<unknown function>", 0
            else:
                file = os.path.basename(frame.f_code.co_filename)
                stem = os.path.splitext(file)[0]
                name = frame.f_code.co_name
                fn = f"{stem}.{name}" if stem else name
                line = frame.f_lineno
            del frame

        with self._lock:
            buf = self._buf
            buf.reset()
            buf.append(prefix.color if self._color else prefix.plain)
            if self._timestamp:
                if self._color:
                    buf.blue()
                buf.append_int(now.tm_year, 4)
                buf.append_byte(ord("/"))
                buf.append_int(now.tm_mon, 2)
                buf.append_byte(ord("/"))
                buf.append_int(now.tm_mday, 2)
                buf.append_byte(ord(" "))
                buf.append_int(now.tm_hour, 2)
                buf.append_byte(ord(":"))
                buf.append_int(now.tm_min, 2)
                buf.append_byte(ord(":"))
                buf.append_int(now.tm_sec, 2)
                buf.append_byte(ord(" "))
                if self._color:
                    buf.off()
            if prefix.file:
                if self._color:
                    buf.orange()
                buf.append(fn.encode())
                buf.append_byte(ord(":"))
                buf.append(file.encode())
                buf.append_byte(ord(":"))
                buf.append_int(line, 0)
                buf.append_byte(ord(" "))
                if self._color:
                    buf.off()
            buf.append(data.encode())
            if not data.endswith("\n"):
                buf.append_byte(ord("\n"))
            self._write(buf.bytes())

    def _write(self, payload: bytes) -> None:
        if isinstance(self._out, io.TextIOBase):
            self._out.write(payload.decode("utf-8", "replace"))
        else:
            self._out.write(payload)
        flush = getattr(self._out, "flush", None)
        if flush is not None:
            flush()

    def _enabled(self, threshold: int) -> bool:
        return self._log_level <= threshold

    def fatal(self, *args: Any) -> None:
        """Log at fatal level and exit with status 1."""
        if self._enabled(LogLevel.FATAL):
            self.output(1, FATAL_PREFIX, _sprintln(args))
        sys.exit(1)

    def fatalf(self, fmt: str, *args: Any) -> None:
        """Log a formatted fatal message and exit with status 1."""
        if self._enabled(LogLevel.FATAL):
            self.output(1, FATAL_PREFIX, _sprintf(fmt, args))
        sys.exit(1)

    def error(self, *args: Any) -> None:
        if self._enabled(LogLevel.ERROR):
            self.output(1, ERROR_PREFIX, _sprintln(args))

    def errorf(self, fmt: str, *args: Any) -> None:
        if self._enabled(LogLevel.ERROR):
            self.output(1, ERROR_PREFIX, _sprintf(fmt, args))

    def warn(self, *args: Any) -> None:
        if self._enabled(LogLevel.WARN):
            self.output(1, WARN_PREFIX, _sprintln(args))

    def warnf(self, fmt: str, *args: Any) -> None:
        if self._enabled(LogLevel.WARN):
            self.output(1, WARN_PREFIX, _sprintf(fmt, args))

    def info(self, *args: Any) -> None:
        if self._enabled(LogLevel.INFO):
            self.output(1, INFO_PREFIX, _sprintln(args))

    def infof(self, fmt: str, *args: Any) -> None:
        if self._enabled(LogLevel.INFO):
            self.output(1, INFO_PREFIX, _sprintf(fmt, args))

    def debug(self, *args: Any) -> None:
        if self._log_level == LogLevel.ALL:
            self.output(1, DEBUG_PREFIX, _sprintln(args))

    def debugf(self, fmt: str, *args: Any) -> None:
        if self._log_level == LogLevel.ALL:
            self.output(1, DEBUG_PREFIX, _sprintf(fmt, args))

    def trace(self, *args: Any) -> None:
        if self._log_level == LogLevel.ALL:
            self.output(1, TRACE_PREFIX, _sprintln(args))

    def tracef(self, fmt: str, *args: Any) -> None:
        if self._log_level == LogLevel.ALL:
            self.output(1, TRACE_PREFIX, _sprintf(fmt, args))