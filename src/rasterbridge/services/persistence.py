# src/rasterbridge/services/persistence.py
from __future__ import annotations

import logging
import os
import shutil
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Sequence, Union

from ..contracts.errors import (
    EngineError, InvalidDataset, RasterWriteError, TempFileCleanupError, UnsupportedOperandError,
)
from ..contracts.geo import Bounds, bounds_to_geotransform
from ..contracts.raster import Raster
from ..contracts.tiles import TileCoordinate
from ..ports.raster_engine import Dataset, RasterEnginePort
from .bridge import RasterDatasetBridge

"""
Writes rasters and datasets to files or streams through the engine's
copy-to-format operation.

Flow: (stage temp file) -> (geotransform from bounds) -> driver + options
-> copy with PAM side files disabled -> (copy temp file to stream, delete).
"""

log = logging.getLogger(__name__)

GDAL_PAM_ENABLED = "GDAL_PAM_ENABLED"
GTIFF = "GTiff"
JPEG = "JPEG"

_FORMAT_ALIASES = {
    "jpg": JPEG,
    "jpeg": JPEG,
    "tif": GTIFF,
    "tiff": GTIFF,
    "geotiff": GTIFF,
    "geotif": GTIFF,
    "gtif": GTIFF,
    "gtiff": GTIFF,
}

# GDAL_PAM_ENABLED is process-wide engine state
_PAM_LOCK = threading.Lock()

Destination = Union[str, "os.PathLike[str]", BinaryIO]
BoundsLike = Union[Bounds, TileCoordinate]


def normalize_format(fmt: str) -> str:
    return _FORMAT_ALIASES.get(fmt.strip().lower(), fmt.strip())


@contextmanager
def pam_disabled(engine: RasterEnginePort) -> Iterator[None]:
    """Turn off .aux.xml side files for the block, restoring the previous value on exit."""
    with _PAM_LOCK:
        previous = engine.get_config(GDAL_PAM_ENABLED)
        engine.set_config(GDAL_PAM_ENABLED, "NO")
        try:
            yield
        finally:
            engine.set_config(GDAL_PAM_ENABLED, previous)


def _is_stream(destination: Destination) -> bool:
    return hasattr(destination, "write") and not isinstance(destination, (str, os.PathLike))


@dataclass(frozen=True)
class TilePersistenceWriter:
    engine: RasterEnginePort
    bridge: RasterDatasetBridge
    canonical_crs: str = "EPSG:4326"
    max_block_size: int = 2048
    deflate_level: int = 6
    temp_dir: Optional[Path] = None
    default_format: str = GTIFF
    _canonical_wkt: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_canonical_wkt", self.engine.srs_wkt(self.canonical_crs))

    # --------- options ---------
    def creation_options(self, driver: str, xsize: int, ysize: int,
                         options: Sequence[str] = ()) -> List[str]:
        """Caller options first; GTiff gets tiled/deflate defaults appended.

        The engine honours the first occurrence of a key, so caller values win.
        GTiff tiles must be multiples of 16 pixels; other block sizes are
        written as strips of BLOCKYSIZE rows.
        """
        opts = list(options)
        if driver.lower() == GTIFF.lower():
            block_x = min(xsize, self.max_block_size)
            block_y = min(ysize, self.max_block_size)
            opts += [
                "INTERLEAVE=BAND",
                "COMPRESS=DEFLATE",
                "PREDICTOR=1",
                f"ZLEVEL={self.deflate_level}",
            ]
            if block_x % 16 == 0 and block_y % 16 == 0:
                opts.append("TILED=YES")
            opts += [f"BLOCKXSIZE={block_x}", f"BLOCKYSIZE={block_y}"]
        return opts

    # --------- API ---------
    def save(self, source: Union[Raster, Dataset], destination: Destination,
             bounds: Optional[BoundsLike] = None, nodata: Optional[float] = None,
             fmt: Optional[str] = None, options: Sequence[str] = ()) -> None:
        """Write `source` (Raster or dataset) to a path or binary stream.

        A Raster is converted to a temporary in-memory dataset (pre-filled with
        `nodata` when given) that is closed afterwards; a dataset is written
        as is, with its geotransform replaced when `bounds` are supplied.
        """
        if source is None:
            raise InvalidDataset()
        owned = isinstance(source, Raster)
        if not owned and not self.engine.is_dataset(source):
            raise UnsupportedOperandError(source)

        ds = self.bridge.to_dataset(source, nodata) if owned else source

        stream = _is_stream(destination)
        filename: Optional[str] = None
        try:
            if stream:
                fd, filename = tempfile.mkstemp(prefix="tmp-file", dir=self.temp_dir)
                os.close(fd)
            else:
                filename = os.fspath(destination)
            if bounds is not None:
                self.georeference(ds, bounds)
            self._write(ds, filename, fmt, options)
        except BaseException:
            if stream and filename is not None:
                self._discard(filename)
            raise
        finally:
            if owned:
                self.engine.close(ds)

        if stream:
            try:
                with open(filename, "rb") as fh:
                    shutil.copyfileobj(fh, destination)  # type: ignore[arg-type]
                destination.flush()  # type: ignore[union-attr]
            except BaseException:
                self._discard(filename)
                raise
            try:
                os.remove(filename)
            except OSError as e:
                raise TempFileCleanupError(filename) from e

    def save_tile(self, source: Union[Raster, Dataset], destination: Destination,
                  tx: int, ty: int, zoom: int, nodata: Optional[float] = None,
                  fmt: Optional[str] = None, options: Sequence[str] = ()) -> None:
        """`save` with bounds of TMS tile (tx, ty, zoom); the tile size is the source width."""
        if source is None:
            raise InvalidDataset()
        if isinstance(source, Raster):
            tile_size = source.width
        elif self.engine.is_dataset(source):
            tile_size = self.engine.size(source)[0]
        else:
            raise UnsupportedOperandError(source)
        tile = TileCoordinate(tx, ty, zoom, tile_size)
        self.save(source, destination, tile.bounds(), nodata, fmt, options)

    def georeference(self, ds: Dataset, bounds: BoundsLike) -> None:
        """North-up geotransform over `bounds` (northwest origin) in the canonical CRS."""
        b = bounds.bounds() if isinstance(bounds, TileCoordinate) else Bounds(*bounds)
        width, height, _ = self.engine.size(ds)
        self.engine.set_geotransform(ds, bounds_to_geotransform(b, width, height))
        self.engine.set_projection(ds, self._canonical_wkt)

    # --------- internals ---------
    def _write(self, ds: Dataset, filename: str, fmt: Optional[str], options: Sequence[str]) -> None:
        driver = normalize_format(fmt or self.default_format)
        if not self.engine.has_driver(driver):
            # CPLE_IllegalArg, CE_Failure
            raise RasterWriteError(filename, EngineError(5, 3, f"No such driver: {driver}"))
        width, height, _ = self.engine.size(ds)
        opts = self.creation_options(driver, width, height, options)

        with pam_disabled(self.engine):
            copy = self.engine.create_copy(driver, filename, ds, opts)
            error = self.engine.last_error() if copy is None else None
        if copy is None:
            raise RasterWriteError(filename, error)
        self.engine.close(copy)
        log.info("Saved %dx%d raster as %s: %s", width, height, driver, filename)

    @staticmethod
    def _discard(filename: str) -> None:
        try:
            os.remove(filename)
        except FileNotFoundError:
            pass
        except OSError as e:
            log.warning("Could not remove temporary file %s: %s", filename, e)


__all__ = [
    "GDAL_PAM_ENABLED", "GTIFF", "JPEG", "normalize_format", "pam_disabled",
    "TilePersistenceWriter",
]
