"""Binary property-list codec.

This module provides encoding and decoding between Python values and the
bplist00 format, along with the object table and byte packing helpers they
share.
"""

from __future__ import annotations

from .decoder import decode, read_trailer
from .encoder import encode
from .flatten import ObjectTable, Shape, flatten, unflatten

__all__ = [
    "encode",
    "decode",
    "read_trailer",
    "flatten",
    "unflatten",
    "ObjectTable",
    "Shape",
]
