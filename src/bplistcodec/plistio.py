"""File-object helpers for binary plists.

These mirror the dump/load family of the standard library's plistlib, but
always read and write the binary format.
"""

from __future__ import annotations

from typing import IO, Any, Optional

from .codec.decoder import Buffer, decode
from .codec.encoder import encode
from .codec.markers import MAGIC
from .config import PlistConfig


def dumps(value: Any, config: Optional[PlistConfig] = None) -> bytes:
    """Return value encoded as a binary plist."""
    return encode(value, config)


def dump(value: Any, fp: IO[bytes], config: Optional[PlistConfig] = None) -> None:
    """Write value as a binary plist to a binary file object."""
    fp.write(encode(value, config))


def loads(data: Buffer, config: Optional[PlistConfig] = None) -> Any:
    """Return the value decoded from binary plist data."""
    return decode(data, config)


def load(fp: IO[bytes], config: Optional[PlistConfig] = None) -> Any:
    """Read a binary plist from a binary file object.

    The whole remaining content of fp is read before decoding starts.
    """
    return decode(fp.read(), config)


def is_binary_plist(data: Buffer) -> bool:
    """Return True if data starts with the binary plist magic.

    Useful for choosing between this codec and an XML plist parser. Only the
    magic is checked; the version and the rest of the document are not.
    """
    return bytes(data[: len(MAGIC)]) == MAGIC
