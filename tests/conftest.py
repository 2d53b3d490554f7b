"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import struct
from typing import Callable, Optional

import pytest

BuildPlist = Callable[..., bytes]


def _build_plist(
    fragments: list[bytes],
    *,
    reference_size: int = 1,
    root: int = 0,
    offset_size: Optional[int] = None,
    object_count: Optional[int] = None,
    version: bytes = b"00",
) -> bytes:
    """Assemble a bplist document from raw object fragments."""
    body = bytearray(b"bplist" + version)
    offsets = []
    for fragment in fragments:
        offsets.append(len(body))
        body += fragment
    table_offset = len(body)
    if offset_size is None:
        offset_size = max(1, (max(offsets).bit_length() + 7) // 8)
    for offset in offsets:
        body += offset.to_bytes(offset_size, "big")
    count = len(fragments) if object_count is None else object_count
    body += struct.pack(">6xBBQQQ", offset_size, reference_size, count, root, table_offset)
    return bytes(body)


@pytest.fixture
def build_plist() -> BuildPlist:
    """Builder for hand-crafted binary plists."""
    return _build_plist


@pytest.fixture
def minimal_true_plist() -> bytes:
    """Smallest valid document: a single true at offset 8."""
    return (
        b"bplist00"
        + b"\x09"  # true
        + b"\x08"  # offset table: object 0 at 8
        + b"\x00" * 6
        + b"\x01\x01"  # offset width, reference width
        + (1).to_bytes(8, "big")  # object count
        + (0).to_bytes(8, "big")  # root object
        + (9).to_bytes(8, "big")  # offset table address
    )


@pytest.fixture
def info_plist() -> dict:
    """Representative Info.plist contents."""
    return {
        "CFBundleDisplayName": "FindMyiPhone",
        "CFBundleIdentifier": "com.apple.mobileme.fmip1",
        "CFBundleVersion": "376",
        "CFBundleShortVersionString": "3.0",
        "CFBundleIconFiles": ["Icon.png", "Icon@2x.png"],
        "CFBundleURLTypes": [{"CFBundleURLSchemes": ["fmip1"]}],
        "MinimumOSVersion": "7.0",
        "UIDeviceFamily": [1, 2],
        "UIPrerenderedIcon": True,
    }
