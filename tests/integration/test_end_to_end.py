"""End-to-end integration tests."""

from __future__ import annotations

import io
import plistlib
from datetime import datetime
from pathlib import Path

import pytest

from bplistcodec import (
    BplistError,
    FormatError,
    PlistConfig,
    PlistSet,
    TruncatedInputError,
    decode,
    dump,
    dumps,
    encode,
    encoded_size,
    is_binary_plist,
    load,
    loads,
    object_count,
    read_trailer,
)


class TestEndToEndWorkflow:
    """Test complete encode/decode workflows."""

    def test_info_plist_workflow(self, info_plist: dict) -> None:
        """Test an application Info.plist round trip."""
        # Encode
        data = encode(info_plist)
        assert data.startswith(b"bplist00")
        assert len(data) == encoded_size(info_plist)

        # Inspect
        trailer = read_trailer(data)
        assert trailer.object_count == object_count(info_plist)
        assert trailer.reference_size == 1

        # Decode
        decoded = decode(data)
        assert decoded == info_plist
        assert list(decoded) == list(info_plist)
        assert decoded["UIDeviceFamily"] == [1, 2]

    def test_mixed_document(self) -> None:
        """Test a document using every supported type."""
        value = {
            "flag": False,
            "count": -(1 << 70),
            "ratio": 0.125,
            "created": datetime(2015, 6, 1, 12, 30, 15, 250000),
            "blob": bytes(range(256)),
            "name": "Zürich",
            "tags": PlistSet(["a", {"nested": [1, 2]}]),
            "matrix": [[1, 2], [3, 4]],
            "empty": {},
        }

        decoded = decode(encode(value))
        assert decoded == value
        assert isinstance(decoded["tags"], PlistSet)

    def test_sorted_output_is_stable(self) -> None:
        """Test sort_keys makes insertion order irrelevant."""
        config = PlistConfig(sort_keys=True)
        first = {"b": 1, "a": {"y": 2, "x": 3}}
        second = {"a": {"x": 3, "y": 2}, "b": 1}
        assert encode(first, config) == encode(second, config)

    def test_large_document(self) -> None:
        """Test reference and offset widths grow with the document."""
        value = {f"key{i}": "v" * (i % 50) for i in range(2000)}
        data = encode(value)
        trailer = read_trailer(data)

        assert trailer.reference_size == 2
        assert trailer.offset_size == 4
        assert decode(data) == value


class TestFileObjects:
    """Test the file-object helpers."""

    def test_dump_load(self, info_plist: dict, tmp_path: Path) -> None:
        """Test writing to and reading from a file."""
        path = tmp_path / "Info.plist"
        with path.open("wb") as fp:
            dump(info_plist, fp)
        with path.open("rb") as fp:
            assert load(fp) == info_plist

    def test_dumps_loads(self, info_plist: dict) -> None:
        """Test the bytes helpers match encode and decode."""
        data = dumps(info_plist)
        assert data == encode(info_plist)
        assert loads(data) == info_plist

    def test_load_stream(self) -> None:
        """Test loading from an in-memory stream."""
        stream = io.BytesIO()
        dump([1, "two", 3.0], stream)
        stream.seek(0)
        assert load(stream) == [1, "two", 3.0]

    def test_is_binary_plist(self, minimal_true_plist: bytes) -> None:
        """Test format sniffing."""
        assert is_binary_plist(minimal_true_plist)
        assert is_binary_plist(b"bplist15")
        assert not is_binary_plist(b'<?xml version="1.0"?>')
        assert not is_binary_plist(b"bpl")


class TestPlistlibInterop:
    """Test compatibility with the standard library's binary plists."""

    def test_stdlib_reads_encoded(self, info_plist: dict) -> None:
        """Test plistlib decodes what this codec writes."""
        assert plistlib.loads(encode(info_plist)) == info_plist

    def test_decodes_stdlib_output(self, info_plist: dict) -> None:
        """Test this codec decodes what plistlib writes."""
        data = plistlib.dumps(info_plist, fmt=plistlib.FMT_BINARY)
        assert decode(data) == info_plist

    def test_stdlib_shared_scalars(self) -> None:
        """Test documents where plistlib reuses one object for equal scalars."""
        value = ["same", "same", {"same": "same"}]
        data = plistlib.dumps(value, fmt=plistlib.FMT_BINARY)

        assert read_trailer(data).object_count < object_count(value)
        assert decode(data) == value

    def test_xml_rejected(self, info_plist: dict) -> None:
        """Test XML plists are reported as a format error."""
        data = plistlib.dumps(info_plist, fmt=plistlib.FMT_XML)
        with pytest.raises(FormatError):
            decode(data)


class TestErrorRecovery:
    """Test error handling across the public API."""

    def test_truncated_file(self, info_plist: dict) -> None:
        """Test a file cut short."""
        data = encode(info_plist)
        with pytest.raises(TruncatedInputError):
            loads(data[:20])
        with pytest.raises(TruncatedInputError):
            loads(data[:-1])

    def test_errors_share_base(self, info_plist: dict) -> None:
        """Test every codec error can be caught as BplistError."""
        data = encode(info_plist)
        corrupted = [b"", data[:-1], b"xplist00" + data[8:], data[:8] + b"\xff" + data[9:]]

        for sample in corrupted:
            with pytest.raises(BplistError):
                decode(sample)
