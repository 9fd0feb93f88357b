import numpy as np
import pytest
from rasterbridge.contracts.raster import NativeType, PixelType
from rasterbridge.services.pixel_types import native_type_for_dtype, to_generic_type, to_native_type

from tests.factories import ALL_PIXEL_TYPES

@pytest.mark.parametrize("pt", ALL_PIXEL_TYPES)
def test_generic_native_generic_is_identity(pt):
    assert to_generic_type(to_native_type(pt)) is pt

def test_uint32_reads_as_signed_int32():
    assert to_generic_type(NativeType.UINT32) is PixelType.INT32

@pytest.mark.parametrize("code", [NativeType.UNKNOWN, 8, 11, 14, 99])
def test_unmapped_native_types_are_undefined(code):
    assert to_generic_type(code) is PixelType.UNDEFINED

def test_undefined_generic_maps_to_unknown():
    assert to_native_type(PixelType.UNDEFINED) is NativeType.UNKNOWN

def test_native_type_for_dtype():
    assert native_type_for_dtype(np.float32) is NativeType.FLOAT32
    assert native_type_for_dtype(np.dtype(">u2")) is NativeType.UINT16
    assert native_type_for_dtype(np.uint32) is NativeType.UNKNOWN
