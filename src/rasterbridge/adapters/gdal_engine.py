# src/rasterbridge/adapters/gdal_engine.py
from __future__ import annotations

import logging
import sys
from typing import Any, Optional, Sequence, Tuple

from osgeo import gdal, osr

from ..contracts.errors import EngineError, ProjectionError
from ..contracts.geo import GeoTransform
from ..contracts.raster import NativeType
from ..ports.raster_engine import ByteOrder, CoordTransform, RasterEnginePort

log = logging.getLogger(__name__)

MEM_DRIVER = "MEM"


def _srs(wkt_or_input: str) -> "osr.SpatialReference":
    srs = osr.SpatialReference()
    srs.SetFromUserInput(wkt_or_input)
    # lon/lat order regardless of the authority's axis definition
    srs.SetAxisMappingStrategy(osr.OAMS_TRADITIONAL_GIS_ORDER)
    return srs


class GdalRasterEngine(RasterEnginePort):
    """RasterEnginePort over the GDAL python bindings (osgeo).

    GDAL runs with exceptions enabled. `create_copy` converts an engine
    exception into a `None` result and keeps the error for `last_error()`,
    so writers see one failure shape whatever the binding mode.
    """

    byte_order: ByteOrder = "little" if sys.byteorder == "little" else "big"

    def __init__(self) -> None:
        gdal.UseExceptions()
        osr.UseExceptions()
        if gdal.GetDriverCount() == 0:
            gdal.AllRegister()

        drivers = gdal.GetDriverCount()
        if drivers == 0:
            log.error("GDAL drivers were not registered, nothing can be read or written")
        if log.isEnabledFor(logging.DEBUG):
            log.debug("GDAL %s, %d drivers supported:", gdal.__version__, drivers)
            for i in range(drivers):
                drv = gdal.GetDriver(i)
                log.debug("  %s (%s)", drv.LongName, drv.ShortName)
        self._pending_error: Optional[EngineError] = None

    # --------------- lifecycle ---------------
    def open(self, path: str) -> Optional[Any]:
        return gdal.Open(path, gdal.GA_ReadOnly)

    def create(self, width: int, height: int, bands: int, native_type: NativeType) -> Optional[Any]:
        driver = gdal.GetDriverByName(MEM_DRIVER)
        return driver.Create("InMem", width, height, bands, int(native_type))

    def close(self, ds: Any) -> None:
        ds.Close()

    def is_dataset(self, obj: Any) -> bool:
        return isinstance(obj, gdal.Dataset)

    def file_list(self, ds: Any) -> Sequence[str]:
        return list(ds.GetFileList() or [])

    # --------------- structure ---------------
    def size(self, ds: Any) -> Tuple[int, int, int]:
        return ds.RasterXSize, ds.RasterYSize, ds.RasterCount

    def band_type(self, ds: Any, band: int) -> int:
        return ds.GetRasterBand(band).DataType

    def data_type_size(self, native_type: int) -> int:
        return gdal.GetDataTypeSize(int(native_type)) // 8

    # --------------- pixels ---------------
    def read_block(self, ds: Any, xoff: int, yoff: int, xsize: int, ysize: int,
                   native_type: NativeType, bands: Sequence[int],
                   pixel_space: int, line_space: int, band_space: int) -> bytes:
        data = ds.ReadRaster(
            xoff, yoff, xsize, ysize,
            buf_xsize=xsize, buf_ysize=ysize, buf_type=int(native_type),
            band_list=list(bands),
            buf_pixel_space=pixel_space, buf_line_space=line_space, buf_band_space=band_space,
        )
        return bytes(data)

    def write_block(self, ds: Any, xoff: int, yoff: int, xsize: int, ysize: int, data: bytes,
                    native_type: NativeType, bands: Sequence[int],
                    pixel_space: int, line_space: int, band_space: int) -> None:
        ds.WriteRaster(
            xoff, yoff, xsize, ysize, data,
            buf_xsize=xsize, buf_ysize=ysize, buf_type=int(native_type),
            band_list=list(bands),
            buf_pixel_space=pixel_space, buf_line_space=line_space, buf_band_space=band_space,
        )

    # --------------- georeferencing / no-data ---------------
    def get_geotransform(self, ds: Any) -> GeoTransform:
        gt = ds.GetGeoTransform()
        return (gt[0], gt[1], gt[2], gt[3], gt[4], gt[5])

    def set_geotransform(self, ds: Any, gt: GeoTransform) -> None:
        ds.SetGeoTransform(list(gt))

    def get_projection(self, ds: Any) -> str:
        return ds.GetProjection() or ""

    def set_projection(self, ds: Any, wkt: str) -> None:
        ds.SetProjection(wkt)

    def get_nodata(self, ds: Any, band: int) -> Optional[float]:
        return ds.GetRasterBand(band).GetNoDataValue()

    def set_nodata(self, ds: Any, band: int, value: float) -> None:
        ds.GetRasterBand(band).SetNoDataValue(float(value))

    def fill_band(self, ds: Any, band: int, value: float) -> None:
        ds.GetRasterBand(band).Fill(float(value))

    # --------------- drivers / output ---------------
    def has_driver(self, name: str) -> bool:
        return gdal.GetDriverByName(name) is not None

    def create_copy(self, driver: str, path: str, ds: Any, options: Sequence[str]) -> Optional[Any]:
        self._pending_error = None
        drv = gdal.GetDriverByName(driver)
        if drv is None:
            self._pending_error = EngineError(gdal.CPLE_IllegalArg, gdal.CE_Failure, f"No such driver: {driver}")
            return None
        try:
            return drv.CreateCopy(path, ds, 1, options=list(options))
        except RuntimeError as e:
            log.debug("CreateCopy(%s, %s) raised: %s", driver, path, e)
            self._pending_error = EngineError(gdal.GetLastErrorNo(), gdal.GetLastErrorType(),
                                              gdal.GetLastErrorMsg() or str(e))
            return None

    def last_error(self) -> EngineError:
        if self._pending_error is not None:
            err, self._pending_error = self._pending_error, None
            return err
        return EngineError(gdal.GetLastErrorNo(), gdal.GetLastErrorType(), gdal.GetLastErrorMsg())

    # --------------- virtual files / config ---------------
    def register_memory_file(self, name: str, data: bytes) -> None:
        gdal.FileFromMemBuffer(name, data)

    def unlink(self, name: str) -> None:
        gdal.Unlink(name)

    def get_config(self, key: str) -> Optional[str]:
        return gdal.GetConfigOption(key)

    def set_config(self, key: str, value: Optional[str]) -> None:
        gdal.SetConfigOption(key, value)

    # --------------- spatial reference ---------------
    def srs_wkt(self, user_input: str) -> str:
        try:
            return _srs(user_input).ExportToWkt()
        except RuntimeError as e:
            raise ProjectionError(f"Unknown spatial reference: {user_input!r}") from e

    def transformer(self, src_wkt: str, dst_wkt: str) -> CoordTransform:
        if not src_wkt or not src_wkt.strip():
            raise ProjectionError("Source projection is empty")
        try:
            ct = osr.CoordinateTransformation(_srs(src_wkt), _srs(dst_wkt))
        except RuntimeError as e:
            raise ProjectionError(f"Cannot transform from {src_wkt[:60]!r}: {e}") from e
        if ct is None:
            raise ProjectionError(f"Cannot transform from {src_wkt[:60]!r}")

        def _transform(x: float, y: float) -> Tuple[float, float]:
            out = ct.TransformPoint(x, y)
            return out[0], out[1]
        return _transform


__all__ = ["GdalRasterEngine", "MEM_DRIVER"]
