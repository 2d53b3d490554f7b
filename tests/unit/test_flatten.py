"""Unit tests for object table construction and resolution."""

from __future__ import annotations

import pytest

from bplistcodec import PlistConfig, PlistSet, UnsupportedTypeError, decode, encode, object_count
from bplistcodec.codec.flatten import Shape, flatten, normalize_key, unflatten
from bplistcodec.codec.markers import ObjectType


class TestNormalizeKey:
    """Test dictionary key normalization."""

    @pytest.mark.parametrize(
        "key,expected",
        [("name", "name"), (1, "1"), (-7, "-7"), (2.5, "2.5"), (True, "True"), (False, "False")],
    )
    def test_scalar_keys(self, key: object, expected: str) -> None:
        """Test keys that have a string form."""
        assert normalize_key(key) == expected

    @pytest.mark.parametrize("key", [None, b"raw", (1, 2), frozenset()])
    def test_rejected_keys(self, key: object) -> None:
        """Test keys without a string form."""
        with pytest.raises(UnsupportedTypeError):
            normalize_key(key)


class TestFlatten:
    """Test flattening value graphs."""

    def test_scalar_root(self) -> None:
        """Test a scalar root is the whole table."""
        table = flatten("hello")
        assert table.objects == ["hello"]

    def test_pre_order(self) -> None:
        """Test containers are numbered before their members."""
        table = flatten({"list": [1, 2], "n": 3})

        assert table.objects[0] == Shape(ObjectType.DICTIONARY, [1, 2, 3, 6])
        assert table.objects[1:3] == ["list", "n"]
        assert table.objects[3] == Shape(ObjectType.ARRAY, [4, 5])
        assert table.objects[4:] == [1, 2, 3]

    def test_shared_container(self) -> None:
        """Test one instance reached three times takes one slot."""
        shared = {"a": 1}
        table = flatten([shared, shared, shared])

        assert len(table) == 4
        assert table.objects[0] == Shape(ObjectType.ARRAY, [1, 1, 1])
        assert encode([shared] * 3)[8:12] == b"\xa3\x01\x01\x01"

    def test_equal_containers_not_merged(self) -> None:
        """Test equal but distinct instances keep their own slots."""
        assert object_count([{"a": 1}, {"a": 1}, {"a": 1}]) == 10

    def test_scalars_not_merged(self) -> None:
        """Test repeated scalars each take a slot."""
        assert object_count(["x", "x", "x"]) == 4

    def test_self_reference(self) -> None:
        """Test a list containing itself."""
        cycle: list = [1]
        cycle.append(cycle)
        table = flatten(cycle)

        assert table.objects == [Shape(ObjectType.ARRAY, [1, 0]), 1]

    def test_sorted_keys(self) -> None:
        """Test sort_keys orders keys and values together."""
        table = flatten({"b": 2, "a": 1}, PlistConfig(sort_keys=True))
        assert table.objects[1:] == ["a", "b", 1, 2]

    @pytest.mark.parametrize(
        "value",
        [{1: "int-key", "1": "str-key"}, {True: "bool-key", "True": "str-key"}, {2.0: "a", "2.0": "b"}],
    )
    def test_colliding_keys_rejected(self, value: dict) -> None:
        """Test keys that normalize to the same string are not merged."""
        with pytest.raises(UnsupportedTypeError, match="both map to"):
            flatten(value)
        with pytest.raises(UnsupportedTypeError):
            encode({"outer": value})

    def test_sorted_set_members(self) -> None:
        """Test sort_keys orders builtin set members."""
        members = frozenset({"gamma", "alpha", "delta", "beta"})
        table = flatten(members, PlistConfig(sort_keys=True))
        assert table.objects[1:] == ["alpha", "beta", "delta", "gamma"]

    def test_sorted_set_mixed_members(self) -> None:
        """Test sets of incomparable members still encode with sort_keys."""
        table = flatten({1, "a"}, PlistConfig(sort_keys=True))
        assert sorted(table.objects[1:], key=str) == [1, "a"]

    def test_plist_set_order_kept(self) -> None:
        """Test PlistSet members keep their order under sort_keys."""
        table = flatten(PlistSet(["b", "a"]), PlistConfig(sort_keys=True))
        assert table.objects[1:] == ["b", "a"]

    def test_deep_nesting(self) -> None:
        """Test nesting deeper than the recursion limit."""
        value: list = []
        for _ in range(5000):
            value = [value]
        assert len(flatten(value)) == 5001

    def test_bytearray_stored_as_bytes(self) -> None:
        """Test bytearray values are copied to bytes."""
        table = flatten([bytearray(b"ab")])
        assert table.objects[1] == b"ab"
        assert type(table.objects[1]) is bytes


class TestUnflatten:
    """Test rebuilding value graphs from object tables."""

    def test_resolves_each_slot_once(self) -> None:
        """Test every slot is decoded at most once."""
        entries = [Shape(ObjectType.ARRAY, [1, 1, 2]), Shape(ObjectType.DICTIONARY, [2, 2]), "k"]
        calls: list[int] = []

        def decode_entry(slot: int) -> object:
            calls.append(slot)
            return entries[slot]

        result = unflatten(0, decode_entry)

        assert result == [{"k": "k"}, {"k": "k"}, "k"]
        assert result[0] is result[1]
        assert sorted(calls) == [0, 1, 2]

    def test_shared_instance_round_trip(self) -> None:
        """Test a shared container decodes as one instance."""
        shared = {"a": 1}
        result = decode(encode({"x": shared, "y": shared}))

        assert result == {"x": {"a": 1}, "y": {"a": 1}}
        assert result["x"] is result["y"]

    def test_cycle_round_trip(self) -> None:
        """Test a self-referencing list survives encoding."""
        cycle: list = ["head"]
        cycle.append(cycle)
        result = decode(encode(cycle))

        assert result[0] == "head"
        assert result[1] is result

    def test_dictionary_cycle(self) -> None:
        """Test a dictionary that refers to itself."""
        node: dict = {"name": "root"}
        node["self"] = node
        result = decode(encode(node))

        assert result["self"] is result
        assert result["name"] == "root"

    def test_deep_nesting_round_trip(self) -> None:
        """Test decoding nesting deeper than the recursion limit."""
        value: list = []
        for _ in range(5000):
            value = [value]
        result = decode(encode(value))

        depth = 0
        while result:
            result = result[0]
            depth += 1
        assert depth == 5000
