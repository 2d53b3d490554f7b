"""The fixed 32-byte trailer that closes every binary plist."""

from __future__ import annotations

import struct

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..codec.markers import HEADER_SIZE, TRAILER_FORMAT


class Trailer(BaseModel):
    """Decoded bplist trailer.

    Attributes:
        offset_size: Byte width of each offset table entry
        reference_size: Byte width of each object reference
        object_count: Number of objects (and offset table entries)
        root_object: Index of the top-level object
        offset_table_offset: Byte address where the offset table starts

    Example:
        >>> trailer = Trailer(offset_size=1, reference_size=1, object_count=1,
        ...                   root_object=0, offset_table_offset=9)
        >>> len(trailer.pack())
        32
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    offset_size: int = Field(ge=1, le=16)
    reference_size: int = Field(ge=1, le=16)
    object_count: int = Field(ge=1)
    root_object: int = Field(ge=0)
    offset_table_offset: int = Field(ge=HEADER_SIZE)

    @model_validator(mode="after")
    def check_root(self) -> Trailer:
        if self.root_object >= self.object_count:
            raise ValueError(
                f"root object {self.root_object} outside table of {self.object_count} objects"
            )
        return self

    def pack(self) -> bytes:
        """Serialize the trailer to its 32-byte wire form."""
        return struct.pack(
            TRAILER_FORMAT,
            self.offset_size,
            self.reference_size,
            self.object_count,
            self.root_object,
            self.offset_table_offset,
        )

    def offset_table_end(self) -> int:
        """Return the address just past the last offset table entry."""
        return self.offset_table_offset + self.object_count * self.offset_size
