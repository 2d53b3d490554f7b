"""Binary plist encoder.

This module provides the encode() function that converts a value graph to
the bplist00 format: the value is flattened into an object table, each entry
is written as a marker-prefixed fragment, and the offset table and trailer
are appended.
"""

from __future__ import annotations

import logging
import struct
from datetime import datetime, timezone
from typing import Any, Optional

from ..config import PlistConfig
from ..exceptions import EncodingError, SizeError, UnsupportedTypeError
from ..models.trailer import Trailer
from .bytepack import ByteWriter, int_width, uint_width
from .flatten import Shape, flatten
from .markers import (
    DATE_64,
    EXTENDED_LENGTH,
    FALSE,
    HEADER,
    MAX_INLINE_LENGTH,
    REAL_64,
    REFERENCE_EPOCH,
    TRUE,
    ObjectType,
)

logger = logging.getLogger(__name__)


def encode(value: Any, config: Optional[PlistConfig] = None) -> bytes:
    """Encode a value to binary plist format.

    Args:
        value: Root value: bool, int, float, datetime, bytes, str, list,
            tuple, set, PlistSet or dict, nested freely
        config: Codec options (None for defaults)

    Returns:
        The complete bplist00 document. Members of a builtin set or frozenset
        are written in the interpreter's iteration order, which for strings
        varies with PYTHONHASHSEED; pass PlistConfig(sort_keys=True) to sort
        comparable members, or use PlistSet to fix the order.

    Raises:
        UnsupportedTypeError: If the graph holds a value outside the plist
            model, or two dictionary keys map to the same string
        EncodingError: If a string holds a code point above U+FFFF
        SizeError: If an integer doesn't fit in 128 bits

    Examples:
        ```python
        from bplistcodec import decode, encode

        data = encode({"CFBundleVersion": "1.0"})
        assert data.startswith(b"bplist00")
        assert decode(data) == {"CFBundleVersion": "1.0"}
        ```
    """
    table = flatten(value, config)
    reference_size = uint_width(len(table) - 1)

    writer = ByteWriter()
    writer.write_bytes(HEADER)

    offsets: list[int] = []
    for entry in table.objects:
        offsets.append(writer.position())
        _encode_object(writer, entry, reference_size)

    offset_table_offset = writer.position()
    offset_size = uint_width(max(offsets))
    writer.write_uints(offsets, offset_size)

    trailer = Trailer(
        offset_size=offset_size,
        reference_size=reference_size,
        object_count=len(offsets),
        root_object=0,
        offset_table_offset=offset_table_offset,
    )
    writer.write_bytes(trailer.pack())

    logger.debug(
        "Encoded %d objects (reference_size=%d, offset_size=%d, %d bytes)",
        len(offsets),
        reference_size,
        offset_size,
        writer.position(),
    )
    return writer.to_bytes()


def _encode_object(writer: ByteWriter, entry: Any, reference_size: int) -> None:
    """Write one object table entry.

    Args:
        writer: ByteWriter to append to
        entry: Scalar value or Shape
        reference_size: Byte width of object references in this document

    Raises:
        UnsupportedTypeError: If entry is not a plist value
    """
    # bool before int: bool is an int subclass
    if isinstance(entry, bool):
        writer.write_uint(TRUE if entry else FALSE, 1)
        return

    if isinstance(entry, int):
        _encode_integer(writer, entry)
        return

    if isinstance(entry, float):
        writer.write_uint(REAL_64, 1)
        writer.write_bytes(struct.pack(">d", entry))
        return

    if isinstance(entry, datetime):
        writer.write_uint(DATE_64, 1)
        writer.write_bytes(struct.pack(">d", _date_to_seconds(entry)))
        return

    if isinstance(entry, bytes):
        _encode_marker(writer, ObjectType.DATA, len(entry))
        writer.write_bytes(entry)
        return

    if isinstance(entry, str):
        _encode_string(writer, entry)
        return

    if isinstance(entry, Shape):
        _encode_marker(writer, entry.kind, entry.length())
        writer.write_uints(entry.refs, reference_size)
        return

    raise UnsupportedTypeError(f"Cannot encode {type(entry).__name__} as a plist value")


def _encode_marker(writer: ByteWriter, kind: ObjectType, length: int) -> None:
    """Write a marker byte, spilling lengths over 14 into an integer object."""
    if length <= MAX_INLINE_LENGTH:
        writer.write_uint((kind << 4) | length, 1)
        return
    writer.write_uint((kind << 4) | EXTENDED_LENGTH, 1)
    _encode_integer(writer, length)


def _encode_integer(writer: ByteWriter, value: int) -> None:
    try:
        width = int_width(value)
    except ValueError as err:
        raise SizeError(f"Integer {value} doesn't fit in 128 bits") from err

    writer.write_uint((ObjectType.INTEGER << 4) | (width.bit_length() - 1), 1)
    if width >= 8:
        writer.write_int(value, width)
    else:
        writer.write_uint(value, width)


def _encode_string(writer: ByteWriter, text: str) -> None:
    """Write text as an ASCII string if possible, otherwise as UTF-16."""
    if text.isascii():
        _encode_marker(writer, ObjectType.ASCII_STRING, len(text))
        writer.write_bytes(text.encode("ascii"))
        return

    for position, char in enumerate(text):
        if ord(char) > 0xFFFF:
            raise EncodingError(
                f"Character U+{ord(char):X} at position {position} is outside the "
                f"Basic Multilingual Plane"
            )
    try:
        encoded = text.encode("utf-16-be")
    except UnicodeEncodeError as err:
        # lone surrogates
        raise EncodingError(f"String is not valid UTF-16: {err}") from err
    _encode_marker(writer, ObjectType.UNICODE_STRING, len(text))
    writer.write_bytes(encoded)


def _date_to_seconds(value: datetime) -> float:
    """Return seconds since 2001-01-01T00:00:00Z. Naive datetimes are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return (value - REFERENCE_EPOCH).total_seconds()
