"""bplistcodec: Binary Property List Codec

A Python library for reading and writing Apple's binary property list
format ("bplist00"), as found in Info.plist files inside application bundles.

Key Features:
- Encode and decode bool, int (up to 128 bits), float, datetime, bytes, str,
  list, set and dict values
- Shared container instances written once and restored as one instance
- Typed errors for malformed, truncated and unsupported input
- Pure Python implementation (no C dependencies)

Quick Start:
    >>> from bplistcodec import decode, encode
    >>>
    >>> data = encode({"CFBundleVersion": "1.0", "UIDeviceFamily": [1, 2]})
    >>> data[:8]
    b'bplist00'
    >>> decode(data)
    {'CFBundleVersion': '1.0', 'UIDeviceFamily': [1, 2]}
"""

from __future__ import annotations

from .codec import decode, encode, read_trailer
from .config import PlistConfig
from .exceptions import (
    BplistError,
    EncodingError,
    FormatError,
    SizeError,
    TruncatedInputError,
    UnsupportedTypeError,
)
from .models import PlistSet, Trailer, Value
from .plistio import dump, dumps, is_binary_plist, load, loads
from .utils import encoded_size, object_count

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "read_trailer",
    # File objects
    "dump",
    "dumps",
    "load",
    "loads",
    "is_binary_plist",
    # Types
    "PlistSet",
    "Trailer",
    "Value",
    "PlistConfig",
    # Exceptions
    "BplistError",
    "FormatError",
    "TruncatedInputError",
    "UnsupportedTypeError",
    "EncodingError",
    "SizeError",
    # Sizing
    "encoded_size",
    "object_count",
    # Version
    "__version__",
]
