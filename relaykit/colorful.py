"""ANSI colour sequences for terminal log output."""

from __future__ import annotations

import sys

from relaykit.buffer import Buffer

if sys.platform.startswith("linux"):
    COLOR_OFF = b"\033[0m"
    COLOR_RED = b"\033[0;31m"
    COLOR_GREEN = b"\033[0;32m"
    COLOR_ORANGE = b"\033[0;33m"
    COLOR_BLUE = b"\033[0;34m"
    COLOR_PURPLE = b"\033[0;35m"
    COLOR_CYAN = b"\033[0;36m"
    COLOR_GRAY = b"\033[0;37m"
else:
    COLOR_OFF = COLOR_RED = COLOR_GREEN = COLOR_ORANGE = b""
    COLOR_BLUE = COLOR_PURPLE = COLOR_CYAN = COLOR_GRAY = b""


class ColorBuffer(Buffer):
    """Buffer that can also append colour switches."""

    def off(self) -> None:
        self.append(COLOR_OFF)

    def red(self) -> None:
        self.append(COLOR_RED)

    def green(self) -> None:
        self.append(COLOR_GREEN)

    def orange(self) -> None:
        self.append(COLOR_ORANGE)

    def blue(self) -> None:
        self.append(COLOR_BLUE)

    def purple(self) -> None:
        self.append(COLOR_PURPLE)

    def cyan(self) -> None:
        self.append(COLOR_CYAN)

    def gray(self) -> None:
        self.append(COLOR_GRAY)


def _mix(data: bytes, color: bytes) -> bytes:
    return color + bytes(data) + COLOR_OFF


def red(data: bytes) -> bytes:
    return _mix(data, COLOR_RED)


def green(data: bytes) -> bytes:
    return _mix(data, COLOR_GREEN)


def orange(data: bytes) -> bytes:
    return _mix(data, COLOR_ORANGE)


def blue(data: bytes) -> bytes:
    return _mix(data, COLOR_BLUE)


def purple(data: bytes) -> bytes:
    return _mix(data, COLOR_PURPLE)


def cyan(data: bytes) -> bytes:
    return _mix(data, COLOR_CYAN)


def gray(data: bytes) -> bytes:
    return _mix(data, COLOR_GRAY)