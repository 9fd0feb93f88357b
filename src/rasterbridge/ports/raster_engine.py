# src/rasterbridge/ports/raster_engine.py
from __future__ import annotations

from typing import Any, Callable, Literal, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..contracts.errors import EngineError
from ..contracts.geo import GeoTransform, Point
from ..contracts.raster import NativeType

Dataset = Any  # opaque engine handle
ByteOrder = Literal["little", "big"]
CoordTransform = Callable[[float, float], Point]


@runtime_checkable
class RasterEnginePort(Protocol):
    """
    Native raster engine capability (GDAL-like).

    Datasets are opaque: callers only hand them back to the engine. Band
    indices are 1-based. Raw buffers use `byte_order`.
    """
    byte_order: ByteOrder

    # --- lifecycle ---
    def open(self, path: str) -> Optional[Dataset]: ...
    def create(self, width: int, height: int, bands: int, native_type: NativeType) -> Optional[Dataset]: ...
    def close(self, ds: Dataset) -> None: ...
    def is_dataset(self, obj: Any) -> bool: ...
    def file_list(self, ds: Dataset) -> Sequence[str]: ...

    # --- structure ---
    def size(self, ds: Dataset) -> Tuple[int, int, int]: ...  # (width, height, bands)
    def band_type(self, ds: Dataset, band: int) -> int: ...
    def data_type_size(self, native_type: int) -> int: ...  # bytes

    # --- pixels ---
    def read_block(self, ds: Dataset, xoff: int, yoff: int, xsize: int, ysize: int,
                   native_type: NativeType, bands: Sequence[int],
                   pixel_space: int, line_space: int, band_space: int) -> bytes: ...
    def write_block(self, ds: Dataset, xoff: int, yoff: int, xsize: int, ysize: int, data: bytes,
                    native_type: NativeType, bands: Sequence[int],
                    pixel_space: int, line_space: int, band_space: int) -> None: ...

    # --- georeferencing / no-data ---
    def get_geotransform(self, ds: Dataset) -> GeoTransform: ...
    def set_geotransform(self, ds: Dataset, gt: GeoTransform) -> None: ...
    def get_projection(self, ds: Dataset) -> str: ...
    def set_projection(self, ds: Dataset, wkt: str) -> None: ...
    def get_nodata(self, ds: Dataset, band: int) -> Optional[float]: ...
    def set_nodata(self, ds: Dataset, band: int, value: float) -> None: ...
    def fill_band(self, ds: Dataset, band: int, value: float) -> None: ...

    # --- drivers / output ---
    def has_driver(self, name: str) -> bool: ...
    def create_copy(self, driver: str, path: str, ds: Dataset, options: Sequence[str]) -> Optional[Dataset]: ...
    def last_error(self) -> EngineError: ...

    # --- virtual files / global config ---
    def register_memory_file(self, name: str, data: bytes) -> None: ...
    def unlink(self, name: str) -> None: ...
    def get_config(self, key: str) -> Optional[str]: ...
    def set_config(self, key: str, value: Optional[str]) -> None: ...

    # --- spatial reference ---
    def srs_wkt(self, user_input: str) -> str: ...
    def transformer(self, src_wkt: str, dst_wkt: str) -> CoordTransform: ...  # raises ProjectionError

__all__ = ["RasterEnginePort", "Dataset", "ByteOrder", "CoordTransform"]
