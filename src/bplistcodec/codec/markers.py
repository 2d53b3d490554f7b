"""Marker byte layout of the bplist00 format.

Every object fragment starts with a marker byte. The high nibble selects the
object type; the low nibble is either a length (0-14), the extended length
sentinel 0xF, or a type-specific sub-code.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta

MAGIC = b"bplist"
VERSION = b"00"
HEADER = MAGIC + VERSION
HEADER_SIZE = len(HEADER)
TRAILER_SIZE = 32

# Trailer layout: 6 reserved bytes, offset width, reference width, object
# count, root object index, offset table address.
TRAILER_FORMAT = ">6xBBQQQ"

# Seconds between the POSIX epoch and 2001-01-01T00:00:00Z.
EPOCH_OFFSET = 978307200
REFERENCE_EPOCH = datetime(1970, 1, 1) + timedelta(seconds=EPOCH_OFFSET)

EXTENDED_LENGTH = 0xF
MAX_INLINE_LENGTH = 14


class ObjectType(enum.IntEnum):
    """High nibble of a marker byte."""

    SIMPLE = 0x0
    INTEGER = 0x1
    REAL = 0x2
    DATE = 0x3
    DATA = 0x4
    ASCII_STRING = 0x5
    UNICODE_STRING = 0x6
    UTF8_STRING = 0x7
    UID = 0x8
    ARRAY = 0xA
    ORDERED_SET = 0xB
    SET = 0xC
    DICTIONARY = 0xD


# Full marker bytes for fixed-size objects.
FALSE = 0x08
TRUE = 0x09
REAL_32 = 0x22
REAL_64 = 0x23
DATE_64 = 0x33


def split_marker(marker: int) -> tuple[int, int]:
    """Split a marker byte into (type nibble, low nibble)."""
    return marker >> 4, marker & 0xF
