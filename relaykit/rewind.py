"""Readers that can replay buffered input, and a write-coalescing writer."""

from __future__ import annotations

import socket
import threading
from typing import Protocol

from relaykit import log


class _RawReader(Protocol):
    def read(self, size: int) -> bytes: ...


class _RawWriter(Protocol):
    def write(self, data: bytes) -> int | None: ...


class RewindReader:
    """Wraps a reader, optionally recording what is read so it can be replayed."""

    def __init__(self, raw_reader: _RawReader) -> None:
        self._lock = threading.Lock()
        self._raw = raw_reader
        self._buf = bytearray()
        self._read_index = 0
        self._rewound = False
        self._buffering = False
        self._buffer_size = 0

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; replayed data is served before new data."""
        with self._lock:
            if self._rewound:
                if len(self._buf) > self._read_index:
                    chunk = bytes(self._buf[self._read_index:self._read_index + size])
                    self._read_index += len(chunk)
                    return chunk
                self._rewound = False
            data = self._raw.read(size)
            if self._buffering:
                self._buf.extend(data)
                if len(self._buf) > self._buffer_size * 2:
                    log.debug("read too many bytes!")
            return data

    def read_byte(self) -> int:
        """Read a single byte; raise EOFError at end of input."""
        data = self.read(1)
        if not data:
            raise EOFError("end of stream")
        return data[0]

    def discard(self, n: int) -> int:
        """Skip up to ``n`` bytes and return how many were skipped."""
        discarded = 0
        while discarded < n:
            chunk = self.read(min(128, n - discarded))
            if not chunk:
                break
            discarded += len(chunk)
        return discarded

    def rewind(self) -> None:
        """Replay buffered data from the start on the following reads."""
        with self._lock:
            if self._buffer_size == 0:
                raise RuntimeError("no buffer")
            self._rewound = True
            self._read_index = 0

    def stop_buffering(self) -> None:
        """Stop recording new reads; already buffered data stays replayable."""
        with self._lock:
            self._buffering = False

    def set_buffer_size(self, size: int) -> None:
        """Start buffering with ``size`` as the expected size, or disable with 0."""
        with self._lock:
            if size == 0:
                if not self._buffering:
                    raise RuntimeError("reader is disabled")
                self._buffering = False
                self._buf = bytearray()
                self._read_index = 0
                self._buffer_size = 0
            else:
                if self._buffering:
                    raise RuntimeError("reader is buffering")
                self._buffering = True
                self._read_index = 0
                self._buffer_size = size
                self._buf = bytearray()


class _ConnReader:
    def __init__(self, conn: socket.socket) -> None:
        self._conn = conn

    def read(self, size: int) -> bytes:
        return self._conn.recv(size)


class RewindConn(RewindReader):
    """A socket connection whose incoming data can be rewound."""

    def __init__(self, conn: socket.socket) -> None:
        super().__init__(_ConnReader(conn))
        self.conn = conn

    def read(self, size: int) -> bytes:
        return super().read(size)

    def write(self, data: bytes) -> int:
        self.conn.sendall(data)
        return len(data)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "RewindConn":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class StickyWriter:
    """Holds back the first ``max_buffered`` writes and sends them as one."""

    def __init__(self, raw_writer: _RawWriter, max_buffered: int = 0) -> None:
        self.raw_writer = raw_writer
        self.max_buffered = max_buffered
        self._pending = bytearray()

    def write(self, data: bytes) -> int | None:
        if self.max_buffered > 0:
            self.max_buffered -= 1
            self._pending.extend(data)
            if self.max_buffered != 0:
                return len(data)
            pending, self._pending = bytes(self._pending), bytearray()
            self.raw_writer.write(pending)
            return len(data)
        return self.raw_writer.write(data)