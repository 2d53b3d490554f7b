"""Codec options.

This module provides the configuration dataclass accepted by encode(),
decode() and the file-object helpers.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlistConfig:
    """Options for encoding and decoding binary plists.

    Attributes:
        sort_keys: Write dictionary entries in sorted key order (default False).
            Members of builtin sets are sorted too when they are comparable.
            When False, entries are written in insertion order.

        aware_datetime: Decode dates as timezone-aware datetimes in UTC
            (default False). When False, dates decode to naive datetimes that
            represent UTC, matching the standard library's plistlib.

    Examples:
        ```python
        from bplistcodec import PlistConfig, decode, encode

        data = encode({"b": 1, "a": 2}, config=PlistConfig(sort_keys=True))
        value = decode(data, config=PlistConfig(aware_datetime=True))
        ```
    """

    sort_keys: bool = False
    aware_datetime: bool = False

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not isinstance(self.sort_keys, bool):
            raise ValueError(f"sort_keys must be a bool, got {self.sort_keys!r}")

        if not isinstance(self.aware_datetime, bool):
            raise ValueError(f"aware_datetime must be a bool, got {self.aware_datetime!r}")


DEFAULT_CONFIG = PlistConfig()
