"""Byte-level packing and unpacking utilities.

This module provides the fixed-width integer handling shared by the encoder
and decoder: minimal width selection, big-endian packing and bounds-checked
reads. All multi-byte values are big-endian.
"""

from __future__ import annotations

# Unsigned widths used for object references and offset table entries.
UNSIGNED_WIDTHS = (1, 2, 4, 8)

# Widths an integer object may take. 1, 2 and 4 are unsigned; 8 and 16 are
# two's complement.
INTEGER_WIDTHS = (1, 2, 4, 8, 16)
SIGNED_WIDTHS = (8, 16)


def uint_width(value: int) -> int:
    """Return the smallest unsigned width (in bytes) that can hold value.

    Args:
        value: Non-negative integer to store

    Returns:
        One of 1, 2, 4 or 8

    Raises:
        ValueError: If value is negative or needs more than 8 bytes
    """
    if value < 0:
        raise ValueError(f"uint_width requires non-negative value, got {value}")
    for width in UNSIGNED_WIDTHS:
        if value < 1 << (8 * width):
            return width
    raise ValueError(f"Value {value} requires more than 8 bytes")


def int_width(value: int) -> int:
    """Return the byte width used to store value as an integer object.

    Non-negative values up to 0xFFFFFFFF take the smallest of 1, 2 or 4
    unsigned bytes. Everything else, including every negative value, is
    stored signed in 8 bytes, or in 16 bytes when it falls outside the
    64-bit range.

    Raises:
        ValueError: If value doesn't fit in 128-bit two's complement
    """
    if 0 <= value <= 0xFFFFFFFF:
        return uint_width(value)
    for width in SIGNED_WIDTHS:
        limit = 1 << (8 * width - 1)
        if -limit <= value < limit:
            return width
    raise ValueError(f"Value {value} doesn't fit in 128 bits")


class ByteWriter:
    """Accumulates big-endian values into a byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_uint(0xD1, 1)
        >>> writer.write_int(-1, 8)
        >>> data = writer.to_bytes()
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_uint(self, value: int, num_bytes: int) -> None:
        """Write an unsigned integer using the specified number of bytes.

        Raises:
            ValueError: If value is negative or doesn't fit in num_bytes
        """
        if value < 0:
            raise ValueError(f"write_uint requires non-negative value, got {value}")
        if num_bytes < 1 or num_bytes > 16:
            raise ValueError(f"num_bytes must be 1-16, got {num_bytes}")
        if value >= 1 << (8 * num_bytes):
            raise ValueError(f"Value {value} requires more than {num_bytes} bytes")
        self._buffer += value.to_bytes(num_bytes, "big")

    def write_int(self, value: int, num_bytes: int) -> None:
        """Write a signed integer using two's complement encoding.

        Raises:
            ValueError: If value doesn't fit in num_bytes
        """
        if num_bytes < 1 or num_bytes > 16:
            raise ValueError(f"num_bytes must be 1-16, got {num_bytes}")
        try:
            self._buffer += value.to_bytes(num_bytes, "big", signed=True)
        except OverflowError as err:
            raise ValueError(f"Value {value} doesn't fit in {num_bytes} bytes") from err

    def write_uints(self, values: list[int], num_bytes: int) -> None:
        """Write a run of unsigned integers sharing one width."""
        for value in values:
            self.write_uint(value, num_bytes)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes."""
        self._buffer += data

    def position(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the accumulated buffer."""
        return bytes(self._buffer)


class ByteReader:
    """Reads big-endian values from a window of a byte buffer.

    Reads never go past ``end``; an attempt to do so raises IndexError and
    leaves the position unchanged.

    Example:
        >>> reader = ByteReader(data, start=8, end=table_offset)
        >>> marker = reader.read_uint(1)
    """

    def __init__(self, data: bytes | bytearray | memoryview, start: int = 0, end: int | None = None) -> None:
        """Initialize a reader over data[start:end].

        Args:
            data: Byte buffer to read from
            start: Initial read position
            end: Position reads may not pass (defaults to len(data))
        """
        self._data = memoryview(data).cast("B") if isinstance(data, memoryview) else data
        self._end = len(self._data) if end is None else min(end, len(self._data))
        self._position = start

    def _take(self, num_bytes: int) -> bytes:
        if num_bytes < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {num_bytes}")
        if self._position + num_bytes > self._end:
            raise IndexError(
                f"Not enough bytes at offset {self._position}: need {num_bytes}, "
                f"have {max(self._end - self._position, 0)}"
            )
        chunk = bytes(self._data[self._position : self._position + num_bytes])
        self._position += num_bytes
        return chunk

    def read_uint(self, num_bytes: int) -> int:
        """Read an unsigned big-endian integer of num_bytes."""
        return int.from_bytes(self._take(num_bytes), "big")

    def read_int(self, num_bytes: int) -> int:
        """Read a two's complement big-endian integer of num_bytes."""
        return int.from_bytes(self._take(num_bytes), "big", signed=True)

    def read_uints(self, count: int, num_bytes: int) -> list[int]:
        """Read count unsigned integers sharing one width."""
        raw = self._take(count * num_bytes)
        return [int.from_bytes(raw[i : i + num_bytes], "big") for i in range(0, len(raw), num_bytes)]

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes."""
        return self._take(num_bytes)

    def seek(self, position: int) -> None:
        """Move the read position."""
        self._position = position

    def position(self) -> int:
        """Return the current read position."""
        return self._position

    def bytes_remaining(self) -> int:
        """Return the number of bytes left before the end of the window."""
        return max(self._end - self._position, 0)
