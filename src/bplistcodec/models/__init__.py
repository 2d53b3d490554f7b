"""Value and record types for bplistcodec.

This module provides the Python-side types of the property-list value model
and the pydantic model of the binary trailer.
"""

from __future__ import annotations

from .trailer import Trailer
from .values import PlistSet, Value

__all__ = [
    "PlistSet",
    "Trailer",
    "Value",
]
