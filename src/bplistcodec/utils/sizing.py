"""Encoded size calculation utilities.

This module provides functions to measure a value's binary plist form.
"""

from __future__ import annotations

from typing import Any, Optional

from ..codec.encoder import encode
from ..codec.flatten import flatten
from ..config import PlistConfig


def encoded_size(value: Any, config: Optional[PlistConfig] = None) -> int:
    """Return the size in bytes of the binary plist for value.

    A single boolean takes 42 bytes: the 8-byte header, a 1-byte object, a
    1-byte offset table entry and the 32-byte trailer.

    Example:
        >>> encoded_size(True)
        42
    """
    return len(encode(value, config))


def object_count(value: Any, config: Optional[PlistConfig] = None) -> int:
    """Return the number of object table entries value flattens to.

    Containers reached more than once through the same instance count once;
    scalars count every time they appear. Below, the entries are the array,
    the dictionary, the key "a" and the value 1.

    Example:
        >>> shared = {"a": 1}
        >>> object_count([shared, shared, shared])
        4
    """
    return len(flatten(value, config))
