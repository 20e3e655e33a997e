"""Locate one entry of a geoip/geosite list file without parsing the whole file.

The file is a protobuf list whose entries are length-delimited messages in
field 1, each starting with its code as a length-delimited string in field 1.
"""

from __future__ import annotations

import io
import os
from typing import BinaryIO

_TAG = 10  # field 1, wire type 2
_MAX_VARINT_BYTES = 10


class GeodataError(Exception):
    """The geodata file could not be read or is malformed."""


class CodeNotFoundError(GeodataError):
    """The requested code is not present in the file."""

    def __init__(self, message: str = "code not found") -> None:
        super().__init__(message)


def _consume_varint(data: bytes) -> tuple[int, int]:
    value = 0
    for shift, byte in enumerate(data[:_MAX_VARINT_BYTES]):
        value |= (byte & 0x7F) << (7 * shift)
        if byte < 0x80:
            if shift == _MAX_VARINT_BYTES - 1 and byte > 1:
                break
            return value, shift + 1
    raise GeodataError("invalid geodata varint length")


def _read(stream: BinaryIO, size: int) -> bytes:
    try:
        chunk = stream.read(size)
    except OSError as exc:
        raise GeodataError("failed to read bytes") from exc
    if size and not chunk:
        raise CodeNotFoundError()
    if len(chunk) != size:
        raise GeodataError("failed to read expected length of bytes")
    return chunk


def emit_bytes(stream: BinaryIO, code: str) -> bytes:
    """Return the raw message of the entry whose code equals ``code``, ignoring case."""
    wanted = code.casefold()
    step = 1
    advance = 1
    inner = False
    pending = bytearray()
    entry_length = code_length = length_bytes = 0

    while True:
        chunk = _read(stream, advance)
        if step in (1, 3):
            if chunk[0] != _TAG:
                raise GeodataError("invalid geodata file")
            advance = 1
            step += 1
        elif step in (2, 4):
            pending.extend(chunk)
            if chunk[0] > 127:
                advance = 1
                continue
            value, used = _consume_varint(bytes(pending))
            pending.clear()
            if not inner:
                inner = True
                entry_length = value
                advance = 1
            else:
                inner = False
                code_length = value
                length_bytes = used
                advance = code_length
            step += 1
        elif step == 5:
            if chunk.decode("utf-8", "replace").casefold() == wanted:
                step += 1
                stream.seek(-(1 + length_bytes + code_length), io.SEEK_CUR)
                advance = entry_length
            else:
                step = 1
                stream.seek(entry_length - code_length - length_bytes - 1, io.SEEK_CUR)
                advance = 1
        else:
            return chunk


def decode(filename: str | os.PathLike, code: str) -> bytes:
    """Open ``filename`` and return the raw message of entry ``code``."""
    with open(filename, "rb") as stream:
        return emit_bytes(stream, code)