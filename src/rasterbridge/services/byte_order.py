# src/rasterbridge/services/byte_order.py
from __future__ import annotations

import sys
from typing import Union

import numpy as np

from ..contracts.raster import NativeType

WritableBuffer = Union[bytearray, memoryview, np.ndarray]

_ELEMENT_WIDTH = {
    NativeType.BYTE: 1,
    NativeType.UINT16: 2,
    NativeType.INT16: 2,
    NativeType.UINT32: 4,
    NativeType.INT32: 4,
    NativeType.FLOAT32: 4,
    NativeType.FLOAT64: 8,
}


def element_width(native_type: int) -> int:
    try:
        return _ELEMENT_WIDTH[NativeType(native_type)]
    except (KeyError, ValueError):
        raise ValueError(f"No element width for native type {native_type!r}") from None


def needs_swap(byte_order: str) -> bool:
    return byte_order != sys.byteorder


def swap_bytes(buffer: WritableBuffer, native_type: int) -> None:
    """Reverse the byte order of every element of `buffer`, in place.

    The buffer must be writable and hold whole elements only.
    """
    width = element_width(native_type)
    if width == 1:
        return
    if isinstance(buffer, np.ndarray):
        assert buffer.flags.c_contiguous, "only C-contiguous arrays can be swapped in place"
        raw = buffer.reshape(-1).view(np.uint8)
    else:
        raw = np.frombuffer(buffer, dtype=np.uint8)
    assert raw.size % width == 0, f"buffer of {raw.size} bytes is not a whole number of {width}-byte elements"
    raw.view(f"u{width}").byteswap(inplace=True)


__all__ = ["element_width", "needs_swap", "swap_bytes", "WritableBuffer"]
