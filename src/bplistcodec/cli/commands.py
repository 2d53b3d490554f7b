"""Binary plist inspection CLI commands."""

from __future__ import annotations

import pprint
from pathlib import Path

from ..codec.decoder import decode, read_trailer
from ..codec.markers import HEADER_SIZE, TRAILER_SIZE


def dump_file(file_path: Path) -> None:
    """Decode a binary plist file and pretty-print its value.

    Args:
        file_path: Path to a bplist00 file
    """
    value = decode(file_path.read_bytes())
    pprint.pprint(value, sort_dicts=False)


def info_file(file_path: Path) -> None:
    """Print the trailer fields and section sizes of a binary plist file.

    Args:
        file_path: Path to a bplist00 file
    """
    data = file_path.read_bytes()
    trailer = read_trailer(data)

    object_bytes = trailer.offset_table_offset - HEADER_SIZE
    table_bytes = trailer.object_count * trailer.offset_size

    print(f"{'=' * 19} {file_path.name} {'=' * 19}")
    print(f"File size: {len(data)} bytes")
    print(f"        header{'.' * 32}{HEADER_SIZE}")
    print(f"        objects{'.' * 31}{object_bytes}")
    print(f"        offset table{'.' * 26}{table_bytes}")
    print(f"        trailer{'.' * 31}{TRAILER_SIZE}")
    print()
    print(f"Objects: {trailer.object_count}")
    print(f"Root object: {trailer.root_object}")
    print(f"Reference size: {trailer.reference_size} bytes")
    print(f"Offset size: {trailer.offset_size} bytes")
    print(f"Offset table address: {trailer.offset_table_offset}")
