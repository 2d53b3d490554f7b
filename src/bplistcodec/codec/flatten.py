"""Object table construction and resolution.

Flattening turns a value graph into the object table that a binary plist is
built from: every value gets a slot, and containers are replaced by a Shape
listing the slot numbers of their members. Unflattening runs the other way,
rebuilding containers from decoded shapes.

Both directions use an explicit stack or worklist instead of recursion, so
deeply nested values are limited by memory rather than the interpreter's
recursion limit.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from ..config import DEFAULT_CONFIG, PlistConfig
from ..exceptions import FormatError, UnsupportedTypeError
from ..models.values import SCALAR_TYPES, SET_TYPES, PlistSet
from .markers import ObjectType

logger = logging.getLogger(__name__)


@dataclass
class Shape:
    """Object table entry for a container.

    Attributes:
        kind: ObjectType.ARRAY, ObjectType.SET or ObjectType.DICTIONARY
        refs: Member slot numbers. For dictionaries, every key reference
            followed by every value reference.
    """

    kind: ObjectType
    refs: list[int] = field(default_factory=list)

    def length(self) -> int:
        """Return the entry count written in the marker byte."""
        if self.kind == ObjectType.DICTIONARY:
            return len(self.refs) // 2
        return len(self.refs)


Frame = Tuple[Shape, Iterator[Any]]


def normalize_key(key: Any) -> str:
    """Return the string form of a dictionary key.

    Raises:
        UnsupportedTypeError: If the key is not a str, bool, int or float
    """
    if isinstance(key, str):
        return key
    if isinstance(key, (bool, int, float)):
        return str(key)
    raise UnsupportedTypeError(
        f"Dictionary keys must be strings, got {type(key).__name__}: {key!r}"
    )


def container_kind(value: Any) -> ObjectType:
    """Return the container type a Python value is written as.

    Raises:
        UnsupportedTypeError: If value is not an array, set or dictionary
    """
    if isinstance(value, (PlistSet,) + SET_TYPES):
        return ObjectType.SET
    if isinstance(value, (list, tuple)):
        return ObjectType.ARRAY
    if isinstance(value, Mapping):
        return ObjectType.DICTIONARY
    raise UnsupportedTypeError(f"Cannot encode {type(value).__name__} as a plist value")


class ObjectTable:
    """Ordered object table with identity-based container deduplication.

    Containers are keyed by id() on first registration, so the same instance
    reached twice shares one slot while equal but distinct instances get
    their own. Scalars always get a fresh slot.
    """

    def __init__(self, config: Optional[PlistConfig] = None) -> None:
        self.objects: list[Any] = []
        self._config = config or DEFAULT_CONFIG
        self._slots: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.objects)

    def register(self, value: Any) -> tuple[int, Optional[Frame]]:
        """Give value a slot.

        Returns:
            The slot number and, for a container seen for the first time, a
            frame of (shape, children) whose children still need registering.
        """
        if isinstance(value, SCALAR_TYPES):
            self.objects.append(bytes(value) if isinstance(value, bytearray) else value)
            return len(self.objects) - 1, None

        slot = self._slots.get(id(value))
        if slot is not None:
            return slot, None

        kind = container_kind(value)
        children = self._children(kind, value)
        shape = Shape(kind)
        slot = len(self.objects)
        self._slots[id(value)] = slot
        self.objects.append(shape)
        return slot, (shape, children)

    def _children(self, kind: ObjectType, value: Any) -> Iterator[Any]:
        if kind == ObjectType.SET:
            return iter(self._set_members(value))
        if kind != ObjectType.DICTIONARY:
            return iter(value)

        pairs: dict[str, Any] = {}
        originals: dict[str, Any] = {}
        for key, item in value.items():
            name = normalize_key(key)
            if name in pairs:
                raise UnsupportedTypeError(
                    f"Dictionary keys {originals[name]!r} and {key!r} both map to {name!r}"
                )
            pairs[name] = item
            originals[name] = key
        keys = sorted(pairs) if self._config.sort_keys else list(pairs)
        return itertools.chain(keys, (pairs[key] for key in keys))

    def _set_members(self, value: Any) -> list[Any]:
        """Return set members in write order.

        Builtin sets iterate in hash order, which for strings changes between
        interpreter runs. With sort_keys their members are sorted when they
        are mutually comparable; PlistSet keeps its own order.
        """
        members = list(value)
        if not self._config.sort_keys or isinstance(value, PlistSet):
            return members
        try:
            return sorted(members)
        except TypeError:
            # mixed member types
            return members


def flatten(root: Any, config: Optional[PlistConfig] = None) -> ObjectTable:
    """Build the object table for root.

    The walk is depth-first pre-order: a container takes its slot before any
    of its members, so the root is always slot 0 and every reference from a
    container points either back at an ancestor or forward.

    Args:
        root: Value to flatten
        config: Codec options (sort_keys is honoured here)

    Returns:
        Populated ObjectTable

    Raises:
        UnsupportedTypeError: If the graph holds a non-plist value
    """
    table = ObjectTable(config)
    _, frame = table.register(root)
    stack: list[Frame] = [frame] if frame is not None else []

    while stack:
        shape, children = stack[-1]
        for child in children:
            slot, child_frame = table.register(child)
            shape.refs.append(slot)
            if child_frame is not None:
                stack.append(child_frame)
                break
        else:
            stack.pop()

    logger.debug("Flattened value into %d objects", len(table))
    return table


def _empty_container(kind: ObjectType) -> Any:
    if kind == ObjectType.DICTIONARY:
        return {}
    if kind == ObjectType.SET:
        return PlistSet()
    return []


class Unflattener:
    """Resolves object slots to values for one decode call.

    Each slot is decoded at most once. A container slot is cached as an empty
    container as soon as it is first seen and filled later from the worklist,
    so every reference to a slot yields the same instance, including
    references that form a cycle.
    """

    def __init__(self, decode_entry: Callable[[int], Any]) -> None:
        """Initialize with a callable returning a scalar or Shape for a slot."""
        self._decode_entry = decode_entry
        self._cache: dict[int, Any] = {}
        self._pending: list[tuple[Any, Shape]] = []

    def resolve(self, slot: int) -> Any:
        """Return the value for slot, decoding it on first use."""
        if slot in self._cache:
            return self._cache[slot]

        entry = self._decode_entry(slot)
        if isinstance(entry, Shape):
            value = _empty_container(entry.kind)
            self._pending.append((value, entry))
        else:
            value = entry
        self._cache[slot] = value
        return value

    def run(self, root: int) -> Any:
        """Resolve root and every container reachable from it."""
        value = self.resolve(root)
        while self._pending:
            container, shape = self._pending.pop()
            if shape.kind == ObjectType.DICTIONARY:
                self._fill_dictionary(container, shape)
            else:
                container.extend(self.resolve(ref) for ref in shape.refs)
        logger.debug("Resolved %d objects", len(self._cache))
        return value

    def _fill_dictionary(self, container: dict, shape: Shape) -> None:
        count = shape.length()
        for key_ref, value_ref in zip(shape.refs[:count], shape.refs[count:]):
            key = self.resolve(key_ref)
            if isinstance(key, (list, dict)):
                raise FormatError(f"Dictionary key object {key_ref} is a container")
            container[key] = self.resolve(value_ref)


def unflatten(root: int, decode_entry: Callable[[int], Any]) -> Any:
    """Rebuild the value graph rooted at slot root.

    Args:
        root: Slot number of the top-level object
        decode_entry: Callable returning the decoded scalar or Shape for a slot

    Returns:
        The resolved root value
    """
    return Unflattener(decode_entry).run(root)
