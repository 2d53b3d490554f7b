"""Utility functions for bplistcodec.

This module provides size calculation helpers.
"""

from __future__ import annotations

from .sizing import encoded_size, object_count

__all__ = [
    "encoded_size",
    "object_count",
]
