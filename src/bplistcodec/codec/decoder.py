"""Binary plist decoder.

This module provides the decode() function that converts bplist00 data back
to a value graph. The trailer is read and validated first, then objects are
decoded on demand starting from the root, and container references are
resolved through a per-call cache.
"""

from __future__ import annotations

import logging
import math
import struct
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..config import DEFAULT_CONFIG, PlistConfig
from ..exceptions import FormatError, TruncatedInputError, UnsupportedTypeError
from ..models.trailer import Trailer
from .bytepack import ByteReader
from .flatten import Shape, unflatten
from .markers import (
    DATE_64,
    EXTENDED_LENGTH,
    FALSE,
    HEADER_SIZE,
    MAGIC,
    REAL_32,
    REAL_64,
    REFERENCE_EPOCH,
    TRAILER_FORMAT,
    TRAILER_SIZE,
    TRUE,
    VERSION,
    ObjectType,
    split_marker,
)

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]

_CONTAINER_TYPES = (ObjectType.ARRAY, ObjectType.SET, ObjectType.DICTIONARY)


def decode(data: Buffer, config: Optional[PlistConfig] = None) -> Any:
    """Decode binary plist data to a value.

    Args:
        data: Complete bplist00 document
        config: Codec options (None for defaults)

    Returns:
        The root value. Arrays decode to list, sets to PlistSet, dictionaries
        to dict, data to bytes and dates to datetime.

    Raises:
        FormatError: If the header, trailer or an object is malformed
        TruncatedInputError: If the data ends before what it declares
        UnsupportedTypeError: If an object uses a type outside the plist model

    Examples:
        ```python
        from bplistcodec import decode

        with open("Info.plist", "rb") as fp:
            info = decode(fp.read())
        print(info["CFBundleIdentifier"])
        ```
    """
    trailer = read_trailer(data)
    offsets = _read_offset_table(data, trailer)
    decoder = _ObjectDecoder(data, trailer, offsets, config or DEFAULT_CONFIG)
    return unflatten(trailer.root_object, decoder.decode_object)


def read_trailer(data: Buffer) -> Trailer:
    """Validate the header and return the trailer of a binary plist.

    Bounds are checked before field values, so a buffer that lost bytes from
    its end reports TruncatedInputError rather than a field error.

    Raises:
        FormatError: If the magic or version is wrong or a trailer field is invalid
        TruncatedInputError: If the buffer is too short for what the trailer declares
    """
    magic = bytes(data[: len(MAGIC)])
    if magic != MAGIC[: len(magic)]:
        raise FormatError(f"Not a binary plist: bad magic {magic!r}")
    version = bytes(data[len(MAGIC) : HEADER_SIZE])
    if len(version) == len(VERSION) and version != VERSION:
        raise FormatError(f"Unsupported binary plist version {version!r}")

    size = len(data)
    if size < HEADER_SIZE + TRAILER_SIZE:
        raise TruncatedInputError(
            f"Data too short for a binary plist: {size} bytes, need at least "
            f"{HEADER_SIZE + TRAILER_SIZE}"
        )

    offset_size, reference_size, count, root, table_offset = struct.unpack(
        TRAILER_FORMAT, bytes(data[size - TRAILER_SIZE :])
    )
    logger.debug(
        "Trailer: offset_size=%d reference_size=%d objects=%d root=%d offset_table=%d",
        offset_size,
        reference_size,
        count,
        root,
        table_offset,
    )

    # Every object takes at least one byte between the header and the trailer.
    if count > size - HEADER_SIZE - TRAILER_SIZE:
        raise TruncatedInputError(f"Object count {count} exceeds the {size} byte buffer")
    if table_offset + count * offset_size > size - TRAILER_SIZE:
        raise TruncatedInputError(
            f"Offset table at {table_offset} ({count} x {offset_size} bytes) runs "
            f"past the trailer"
        )

    try:
        return Trailer(
            offset_size=offset_size,
            reference_size=reference_size,
            object_count=count,
            root_object=root,
            offset_table_offset=table_offset,
        )
    except ValidationError as err:
        raise FormatError(f"Invalid trailer: {err}") from err


def _read_offset_table(data: Buffer, trailer: Trailer) -> list[int]:
    reader = ByteReader(data, start=trailer.offset_table_offset, end=trailer.offset_table_end())
    offsets = reader.read_uints(trailer.object_count, trailer.offset_size)
    for index, offset in enumerate(offsets):
        if offset < HEADER_SIZE:
            raise FormatError(f"Object {index} offset {offset} points into the header")
        if offset >= trailer.offset_table_offset:
            raise TruncatedInputError(
                f"Object {index} offset {offset} is past the object region "
                f"(ends at {trailer.offset_table_offset})"
            )
    return offsets


class _ObjectDecoder:
    """Decodes single objects by slot number for one decode call."""

    def __init__(
        self, data: Buffer, trailer: Trailer, offsets: list[int], config: PlistConfig
    ) -> None:
        self._reader = ByteReader(data, end=trailer.offset_table_offset)
        self._trailer = trailer
        self._offsets = offsets
        self._config = config

    def decode_object(self, slot: int) -> Any:
        """Decode the object in slot to a scalar or a Shape of slot references.

        Raises:
            FormatError: If the object is malformed
            TruncatedInputError: If the object runs past the object region
            UnsupportedTypeError: If the marker is not a supported type
        """
        self._reader.seek(self._offsets[slot])
        try:
            return self._decode_at_cursor()
        except IndexError as err:
            raise TruncatedInputError(f"Truncated data while decoding object {slot}: {err}") from err

    def _decode_at_cursor(self) -> Any:
        marker = self._reader.read_uint(1)
        kind, low = split_marker(marker)

        if marker == FALSE:
            return False
        if marker == TRUE:
            return True

        if kind == ObjectType.INTEGER:
            return self._decode_integer(low, marker)

        if marker == REAL_64:
            return struct.unpack(">d", self._reader.read_bytes(8))[0]
        if marker == REAL_32:
            return struct.unpack(">f", self._reader.read_bytes(4))[0]

        if marker == DATE_64:
            seconds = struct.unpack(">d", self._reader.read_bytes(8))[0]
            return self._to_datetime(seconds)

        if kind == ObjectType.DATA:
            return self._reader.read_bytes(self._decode_length(low))

        if kind == ObjectType.ASCII_STRING:
            raw = self._reader.read_bytes(self._decode_length(low))
            try:
                return raw.decode("ascii")
            except UnicodeDecodeError as err:
                raise FormatError(f"ASCII string holds non-ASCII bytes: {err}") from err

        if kind == ObjectType.UNICODE_STRING:
            raw = self._reader.read_bytes(self._decode_length(low) * 2)
            try:
                return raw.decode("utf-16-be")
            except UnicodeDecodeError as err:
                raise FormatError(f"Malformed UTF-16 string: {err}") from err

        if kind in _CONTAINER_TYPES:
            return self._decode_container(ObjectType(kind), self._decode_length(low))

        raise UnsupportedTypeError(f"Unsupported object marker 0x{marker:02x}")

    def _decode_integer(self, low: int, marker: int) -> int:
        if low > 4:
            raise UnsupportedTypeError(f"Unsupported integer marker 0x{marker:02x}")
        width = 1 << low
        if width >= 8:
            return self._reader.read_int(width)
        return self._reader.read_uint(width)

    def _decode_length(self, low: int) -> int:
        """Return the object length from the marker's low nibble or the integer after it."""
        if low != EXTENDED_LENGTH:
            return low
        marker = self._reader.read_uint(1)
        kind, int_low = split_marker(marker)
        if kind != ObjectType.INTEGER:
            raise FormatError(f"Extended length must be an integer, found marker 0x{marker:02x}")
        length = self._decode_integer(int_low, marker)
        if length < 0:
            raise FormatError(f"Negative object length {length}")
        return length

    def _decode_container(self, kind: ObjectType, length: int) -> Shape:
        ref_count = length * 2 if kind == ObjectType.DICTIONARY else length
        refs = self._reader.read_uints(ref_count, self._trailer.reference_size)
        for ref in refs:
            if ref >= self._trailer.object_count:
                raise FormatError(
                    f"Object reference {ref} outside table of {self._trailer.object_count} objects"
                )
        return Shape(kind, refs)

    def _to_datetime(self, seconds: float) -> datetime:
        if not math.isfinite(seconds):
            raise FormatError(f"Date is not a finite number: {seconds}")
        try:
            value = REFERENCE_EPOCH + timedelta(seconds=seconds)
        except OverflowError as err:
            raise FormatError(f"Date {seconds} seconds from 2001 is out of range") from err
        if self._config.aware_datetime:
            return value.replace(tzinfo=timezone.utc)
        return value
