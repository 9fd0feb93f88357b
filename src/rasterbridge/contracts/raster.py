# src/rasterbridge/contracts/raster.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Tuple

import numpy as np
import numpy.typing as npt

from .errors import UnsupportedPixelType


# ---------- Pixel types ----------
class PixelType(str, Enum):
    """Engine-neutral pixel types an in-memory Raster can hold."""
    BYTE = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    UNDEFINED = "undefined"

    @property
    def dtype(self) -> np.dtype:
        if self is PixelType.UNDEFINED:
            raise UnsupportedPixelType(self)
        return np.dtype(self.value)

    @property
    def size(self) -> int:
        """Bytes per sample."""
        return self.dtype.itemsize

    @classmethod
    def from_dtype(cls, dt: Any) -> "PixelType":
        try:
            return cls(np.dtype(dt).name)
        except (TypeError, ValueError) as e:
            raise UnsupportedPixelType(dt) from e


class NativeType(IntEnum):
    """Native engine pixel types. Values follow GDALDataType."""
    UNKNOWN = 0
    BYTE = 1
    UINT16 = 2
    INT16 = 3
    UINT32 = 4
    INT32 = 5
    FLOAT32 = 6
    FLOAT64 = 7


# ---------- Raster (pure domain, no engine) ----------
@dataclass(frozen=True)
class Raster:
    """In-memory pixel grid, band-interleaved-by-pixel.

    `data` has shape (height, width, bands) in C order, so the bytes of
    every band of one pixel are contiguous. A 2D array is promoted to a
    single band. The array is copied on construction: a Raster never
    aliases a buffer it did not allocate.
    """
    data: "npt.NDArray[Any]"  # type: ignore[valid-type]

    def __post_init__(self):
        arr = np.asarray(self.data)
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3:
            raise ValueError(f"Raster data must be 2D or 3D (height, width, bands), got shape {arr.shape}")
        PixelType.from_dtype(arr.dtype)
        # native byte order, C-contiguous, owned
        arr = np.ascontiguousarray(arr, dtype=arr.dtype.newbyteorder("="))
        if arr.base is not None or arr is self.data:
            arr = arr.copy()
        object.__setattr__(self, "data", arr)

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def band_count(self) -> int:
        return int(self.data.shape[2])

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.height, self.width, self.band_count)

    @property
    def pixel_type(self) -> PixelType:
        return PixelType.from_dtype(self.data.dtype)

    @property
    def nbytes(self) -> int:
        return self.width * self.height * self.band_count * self.pixel_type.size

    def row(self, y: int) -> np.ndarray:
        """One row of pixels, shape (width, bands)."""
        return self.data[y]

    def band(self, index: int) -> np.ndarray:
        """Band `index` (1-based, like the engine) as a (height, width) view."""
        if not 1 <= index <= self.band_count:
            raise IndexError(f"band {index} outside 1..{self.band_count}")
        return self.data[:, :, index - 1]

    @classmethod
    def from_bytes(cls, buf: bytes, width: int, height: int, bands: int, pixel_type: PixelType) -> "Raster":
        """Build a Raster over a native-byte-order, pixel-interleaved buffer."""
        arr = np.frombuffer(buf, dtype=pixel_type.dtype, count=width * height * bands)
        return cls(arr.reshape((height, width, bands)))

    @classmethod
    def filled(cls, width: int, height: int, bands: int, value: float, pixel_type: PixelType) -> "Raster":
        return cls(np.full((height, width, bands), value, dtype=pixel_type.dtype))


__all__ = ["PixelType", "NativeType", "Raster"]
