# src/rasterbridge/services/georeference.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Tuple

from ..contracts.errors import InvalidDataset, ProjectionError
from ..contracts.geo import Bounds, Point, corner_points
from ..contracts.tiles import zoom_for_pixel_size
from ..ports.raster_engine import CoordTransform, Dataset, RasterEnginePort

log = logging.getLogger(__name__)


def _identity(x: float, y: float) -> Point:
    return x, y


@dataclass(frozen=True)
class GeoreferenceCalculator:
    """Geographic bounds of a dataset in the canonical CRS.

    All four corners are reprojected and boxed: under a non-linear
    projection the far corners alone do not bound the image.
    A dataset without a usable projection is taken to be in the canonical
    CRS already.
    """
    engine: RasterEnginePort
    canonical_crs: str = "EPSG:4326"
    _canonical_wkt: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_canonical_wkt", self.engine.srs_wkt(self.canonical_crs))

    @property
    def canonical_wkt(self) -> str:
        return self._canonical_wkt

    def _transformer(self, ds: Dataset) -> CoordTransform:
        try:
            return self.engine.transformer(self.engine.get_projection(ds), self._canonical_wkt)
        except ProjectionError as e:
            log.debug("No transformation to %s (%s), using dataset coordinates as-is", self.canonical_crs, e)
            return _identity

    def bounds(self, ds: Dataset) -> Bounds:
        if ds is None:
            raise InvalidDataset()
        width, height, _ = self.engine.size(ds)
        gt = self.engine.get_geotransform(ds)
        tx = self._transformer(ds)
        return Bounds.from_points(tx(x, y) for x, y in corner_points(gt, width, height))

    def pixel_size(self, ds: Dataset) -> Tuple[float, float]:
        """(x, y) pixel size in canonical units, always positive."""
        b = self.bounds(ds)
        width, height, _ = self.engine.size(ds)
        return abs(b.width / width), abs(b.height / height)

    def zoom_level(self, ds: Dataset, tile_size: int) -> int:
        """TMS zoom whose resolution matches the dataset's finer axis."""
        px, py = self.pixel_size(ds)
        return max(zoom_for_pixel_size(px, tile_size), zoom_for_pixel_size(py, tile_size))


__all__ = ["GeoreferenceCalculator"]
