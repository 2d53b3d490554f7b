"""Exception hierarchy for bplistcodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BplistError for easy catching of any codec error.
"""

from __future__ import annotations


class BplistError(Exception):
    """Base exception for all bplistcodec errors."""

    pass


class FormatError(BplistError):
    """Raised when a buffer is not a well-formed bplist00 document.

    Examples:
        - Magic bytes are not ``bplist``
        - Version bytes are not ``00``
        - Trailer fields are inconsistent (zero width, root outside the table)
        - Object reference points outside the offset table
        - Malformed string payload or extended length marker
    """

    pass


class TruncatedInputError(BplistError):
    """Raised when the buffer ends before the data it declares.

    Examples:
        - Buffer shorter than header plus trailer
        - Object count or offset table runs past the end of the buffer
        - Object fragment runs past the start of the offset table
    """

    pass


class UnsupportedTypeError(BplistError):
    """Raised for types outside the property-list value model.

    Examples:
        - Marker byte for null, fill, UID or ordered set objects
        - Unassigned marker nibble
        - Python object passed to encode() that is not a plist value
    """

    pass


class EncodingError(BplistError):
    """Raised when text cannot be stored in the binary format.

    Examples:
        - String containing a code point above U+FFFF
    """

    pass


class SizeError(BplistError):
    """Raised when an integer does not fit in 128-bit two's complement."""

    pass
