# src/rasterbridge/services/pixel_types.py
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from ..contracts.errors import UnsupportedPixelType
from ..contracts.raster import NativeType, PixelType

_TO_NATIVE: Mapping[PixelType, NativeType] = MappingProxyType({
    PixelType.BYTE: NativeType.BYTE,
    PixelType.INT16: NativeType.INT16,
    PixelType.UINT16: NativeType.UINT16,
    PixelType.INT32: NativeType.INT32,
    PixelType.FLOAT32: NativeType.FLOAT32,
    PixelType.FLOAT64: NativeType.FLOAT64,
})

# UInt32 has no generic counterpart and is read as signed 32-bit
_TO_GENERIC: Mapping[int, PixelType] = MappingProxyType({
    NativeType.BYTE: PixelType.BYTE,
    NativeType.UINT16: PixelType.UINT16,
    NativeType.INT16: PixelType.INT16,
    NativeType.UINT32: PixelType.INT32,
    NativeType.INT32: PixelType.INT32,
    NativeType.FLOAT32: PixelType.FLOAT32,
    NativeType.FLOAT64: PixelType.FLOAT64,
})


def to_native_type(pixel_type: PixelType) -> NativeType:
    return _TO_NATIVE.get(pixel_type, NativeType.UNKNOWN)


def to_generic_type(native_type: int) -> PixelType:
    return _TO_GENERIC.get(int(native_type), PixelType.UNDEFINED)


def native_type_for_dtype(dt: Any) -> NativeType:
    """Native type for a numpy dtype; UNKNOWN when the dtype has no generic pixel type."""
    try:
        return to_native_type(PixelType.from_dtype(dt))
    except UnsupportedPixelType:
        return NativeType.UNKNOWN


__all__ = ["to_native_type", "to_generic_type", "native_type_for_dtype"]
