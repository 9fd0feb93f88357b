# src/rasterbridge/services/bridge.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from ..contracts.errors import InvalidDataset, UnsupportedPixelType
from ..contracts.raster import NativeType, PixelType, Raster
from ..ports.raster_engine import Dataset, RasterEnginePort
from .byte_order import needs_swap, swap_bytes
from .pixel_types import to_generic_type, to_native_type

"""
Raster <-> engine dataset conversion.

Pixels cross the boundary band-interleaved-by-pixel: one sample of every
band for a pixel, then the next pixel. Images below LARGE_IMAGE_THRESHOLD
bytes go in a single write; bigger ones are written one row at a time so
only one row is ever serialized.
"""

log = logging.getLogger(__name__)

LARGE_IMAGE_THRESHOLD = 2 ** 31  # bytes

RasterLike = Union[Raster, np.ndarray]


@dataclass(frozen=True)
class InterleavedLayout:
    pixel_size: int
    bands: int
    width: int
    height: int

    @property
    def pixel_space(self) -> int:
        return self.pixel_size * self.bands

    @property
    def line_space(self) -> int:
        return self.pixel_space * self.width

    @property
    def band_space(self) -> int:
        return self.pixel_size

    @property
    def image_size(self) -> int:
        # python ints do not overflow: safe for > 2 GiB images
        return self.pixel_size * self.bands * self.width * self.height

    @property
    def band_list(self) -> List[int]:
        return list(range(1, self.bands + 1))


def _native_type_name(native_type: int) -> str:
    try:
        return NativeType(native_type).name
    except ValueError:
        return f"native type {native_type}"


@dataclass(frozen=True)
class RasterDatasetBridge:
    engine: RasterEnginePort
    large_image_threshold: int = LARGE_IMAGE_THRESHOLD

    # --------- empty datasets ---------
    def create_empty(self, width: int, height: int, bands: int, native_type: NativeType,
                     nodatas: Optional[Sequence[Optional[float]]] = None) -> Optional[Dataset]:
        """In-memory dataset. Bands with a no-data value are filled with it and flag it."""
        ds = self.engine.create(width, height, bands, native_type)
        if ds is None:
            return None
        if nodatas is not None:
            for band, value in enumerate(nodatas[:bands], start=1):
                if value is None:
                    continue
                self.engine.fill_band(ds, band, value)
                self.engine.set_nodata(ds, band, value)
        return ds

    def create_empty_like(self, src: Dataset, width: int, height: int) -> Optional[Dataset]:
        """Empty dataset with the band count, pixel type and no-data values of `src`."""
        if src is None:
            raise InvalidDataset()
        _, _, bands = self.engine.size(src)
        native = self.engine.band_type(src, 1)
        if to_generic_type(native) is PixelType.UNDEFINED:
            raise UnsupportedPixelType(_native_type_name(native))
        return self.create_empty(width, height, bands, NativeType(native), self.get_nodatas(src))

    def get_nodatas(self, ds: Dataset) -> List[Optional[float]]:
        if ds is None:
            raise InvalidDataset()
        _, _, bands = self.engine.size(ds)
        return [self.engine.get_nodata(ds, b) for b in range(1, bands + 1)]

    # --------- Raster -> Dataset ---------
    def to_dataset(self, raster: RasterLike, nodata: Optional[float] = None) -> Dataset:
        """Copy `raster` into a new in-memory dataset.

        When `nodata` is given every band is pre-filled with it and reports it
        as its sentinel. The caller owns (and must close) the returned dataset.
        """
        if not isinstance(raster, Raster):
            raster = Raster(np.asarray(raster))
        native = to_native_type(raster.pixel_type)
        if native is NativeType.UNKNOWN:
            raise UnsupportedPixelType(raster.pixel_type)

        nodatas = None if nodata is None else [float(nodata)] * raster.band_count
        ds = self.create_empty(raster.width, raster.height, raster.band_count, native, nodatas)
        if ds is None:
            raise InvalidDataset(
                f"Engine could not allocate a {raster.width}x{raster.height}x{raster.band_count} "
                f"{raster.pixel_type.name} dataset"
            )
        try:
            self.copy_to_dataset(ds, raster)
        except BaseException:
            self.engine.close(ds)
            raise
        return ds

    def copy_to_dataset(self, ds: Dataset, raster: Raster) -> None:
        native = to_native_type(raster.pixel_type)
        layout = InterleavedLayout(
            pixel_size=self.engine.data_type_size(native),
            bands=raster.band_count,
            width=raster.width,
            height=raster.height,
        )
        swap = needs_swap(self.engine.byte_order)

        if layout.image_size < self.large_image_threshold:
            log.debug("Bulk interleaved write: %d bytes", layout.image_size)
            self._write(ds, 0, raster.height, self._serialize(raster.data, native, swap), native, layout)
        else:
            log.debug("Image of %d bytes exceeds %d, writing %d rows one at a time",
                      layout.image_size, self.large_image_threshold, raster.height)
            for y in range(raster.height):
                self._write(ds, y, 1, self._serialize(raster.row(y), native, swap), native, layout)

    def _write(self, ds: Dataset, yoff: int, rows: int, data: bytes,
               native: NativeType, layout: InterleavedLayout) -> None:
        self.engine.write_block(
            ds, 0, yoff, layout.width, rows, data, native, layout.band_list,
            layout.pixel_space, layout.line_space, layout.band_space,
        )

    @staticmethod
    def _serialize(pixels: np.ndarray, native: NativeType, swap: bool) -> bytes:
        if not swap:
            return pixels.tobytes(order="C")
        buf = bytearray(pixels.tobytes(order="C"))
        swap_bytes(buf, native)
        return bytes(buf)

    # --------- Dataset -> Raster ---------
    def to_raster(self, ds: Dataset) -> Raster:
        if ds is None:
            raise InvalidDataset()
        width, height, bands = self.engine.size(ds)
        native = self.engine.band_type(ds, 1)
        pixel_type = to_generic_type(native)
        if pixel_type is PixelType.UNDEFINED:
            raise UnsupportedPixelType(_native_type_name(native))

        layout = InterleavedLayout(self.engine.data_type_size(native), bands, width, height)
        data: Any = self.engine.read_block(
            ds, 0, 0, width, height, NativeType(native), layout.band_list,
            layout.pixel_space, layout.line_space, layout.band_space,
        )
        if needs_swap(self.engine.byte_order):
            data = bytearray(data)
            swap_bytes(data, native)
        # uint32 samples land in the int32 array bit for bit
        return Raster.from_bytes(data, width, height, bands, pixel_type)


__all__ = ["LARGE_IMAGE_THRESHOLD", "InterleavedLayout", "RasterDatasetBridge"]
