#!/usr/bin/env python3
"""Basic usage example for bplistcodec.

This example demonstrates:
1. Encoding an Info.plist-style dictionary
2. Inspecting the trailer of the encoded document
3. Decoding back to Python values
4. Handling malformed input
"""

from __future__ import annotations

from datetime import datetime

from bplistcodec import (
    BplistError,
    PlistConfig,
    decode,
    encode,
    object_count,
    read_trailer,
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bplistcodec Basic Usage Example")
    print("=" * 60)
    print()

    info = {
        "CFBundleIdentifier": "com.example.notes",
        "CFBundleVersion": "376",
        "CFBundleIconFiles": ["Icon.png", "Icon@2x.png"],
        "UIDeviceFamily": [1, 2],
        "BuildDate": datetime(2014, 9, 17, 8, 30),
        "UIPrerenderedIcon": True,
    }

    # Encode the dictionary
    print("1. Encoding an Info.plist dictionary...")
    data = encode(info, config=PlistConfig(sort_keys=True))
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Objects: {object_count(info)}")
    print(f"   Header: {data[:8]!r}")
    print()

    # Inspect the trailer
    print("2. Reading the trailer...")
    trailer = read_trailer(data)
    print(f"   Offset size: {trailer.offset_size} bytes")
    print(f"   Reference size: {trailer.reference_size} bytes")
    print(f"   Offset table at: {trailer.offset_table_offset}")
    print()

    # Decode the document
    print("3. Decoding back to Python values...")
    decoded = decode(data)
    for key, value in decoded.items():
        print(f"   {key}: {value!r}")
    print(f"   Round trip matches: {decoded == info}")
    print()

    # Shared containers are written once
    print("4. Sharing one container between entries...")
    shared = {"CFBundleURLSchemes": ["notes"]}
    urls = {"primary": shared, "fallback": shared}
    print(f"   Objects: {object_count(urls)}")
    restored = decode(encode(urls))
    print(f"   Same instance after decoding: {restored['primary'] is restored['fallback']}")
    print()

    # Malformed input
    print("5. Decoding a truncated document...")
    try:
        decode(data[:-1])
    except BplistError as e:
        print(f"   {type(e).__name__}: {e}")
    print()

    print("=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
