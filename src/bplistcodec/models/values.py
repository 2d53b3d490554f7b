"""Python representation of property-list values.

Most plist types map directly onto builtins (bool, int, float, datetime,
bytes, str, list, dict). Sets are the exception: their members may be
dictionaries or arrays, which Python's set cannot hold, so decoded sets are
returned as PlistSet.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Union

SCALAR_TYPES = (bool, int, float, datetime, bytes, bytearray, str)
SET_TYPES = (set, frozenset)

Value = Union[bool, int, float, datetime, bytes, str, list, "PlistSet", dict]


class PlistSet(list):
    """A plist set that can hold unhashable members.

    Members keep their encounter order, but equality ignores it: a PlistSet
    equals another PlistSet, set or frozenset with the same members.

    Example:
        >>> PlistSet([1, {"a": 2}]) == PlistSet([{"a": 2}, 1])
        True
        >>> PlistSet([1, 2]) == {2, 1}
        True
    """

    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (PlistSet, set, frozenset)):
            return _same_members(self, other)
        if isinstance(other, list):
            return False
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self) -> str:
        return f"PlistSet({list.__repr__(self)})"


def _same_members(left: Iterable[Any], right: Iterable[Any]) -> bool:
    remaining = list(right)
    for item in left:
        for index, candidate in enumerate(remaining):
            if candidate == item:
                del remaining[index]
                break
        else:
            return False
    return not remaining

