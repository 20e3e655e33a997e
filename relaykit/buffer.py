"""A growable byte buffer used to assemble log lines."""

from __future__ import annotations


class Buffer:
    """Byte buffer with helpers for bytes, single bytes and padded integers."""

    def __init__(self) -> None:
        self._data = bytearray()

    def reset(self) -> None:
        """Empty the buffer."""
        self._data.clear()

    def append(self, data: bytes) -> None:
        """Append a byte string."""
        self._data.extend(data)

    def append_byte(self, value: int | bytes) -> None:
        """Append one byte, given as an int or a one-byte string."""
        if isinstance(value, (bytes, bytearray)):
            if len(value) != 1:
                raise ValueError("expected exactly one byte")
            value = value[0]
        self._data.append(value)

    def append_int(self, value: int, width: int) -> None:
        """Append a non-negative integer in decimal, zero-padded to ``width``."""
        self._data.extend(str(value).zfill(width).encode("ascii"))

    def bytes(self) -> bytes:
        """Return the buffer content."""
        return bytes(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({bytes(self._data)!r})"