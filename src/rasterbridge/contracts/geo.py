# src/rasterbridge/contracts/geo.py

from __future__ import annotations
import math
from typing import Iterable, NamedTuple, Tuple

GeoTransform = Tuple[float, float, float, float, float, float]
Point = Tuple[float, float]

class Bounds(NamedTuple):
    west: float; south: float; east: float; north: float

    @property
    def width(self) -> float:
        return self.east - self.west

    @property
    def height(self) -> float:
        return self.north - self.south

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "Bounds":
        pts = list(points)
        if not pts:
            raise ValueError("Bounds.from_points needs at least one point")
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return cls(min(xs), min(ys), max(xs), max(ys))


# ---------- GeoTransform helpers (GDAL-like, no GDAL dependency) ----------
def bounds_to_geotransform(bounds: Bounds, width: int, height: int) -> GeoTransform:
    """North-up transform covering `bounds` with a width x height pixel grid."""
    w, s, e, n = bounds
    px = (e - w) / float(width)
    py = -(n - s) / float(height)  # negative: origin at the northwest corner
    return (w, px, 0.0, n, 0.0, py)


def corner_points(gt: GeoTransform, width: int, height: int) -> Tuple[Point, Point, Point, Point]:
    """Origin, far corner, far-x/origin-y and origin-x/far-y corners.

    Rotation terms are not applied, matching how the corners are fed to
    reprojection when computing bounds.
    """
    x0, px, _, y0, _, py = gt
    x1 = x0 + px * width
    y1 = y0 + py * height
    return ((x0, y0), (x1, y1), (x1, y0), (x0, y1))


def geotransform_close(a: GeoTransform, b: GeoTransform, tol: float = 1e-6) -> bool:
    return all(math.isclose(x, y, rel_tol=0.0, abs_tol=tol) for x, y in zip(a, b))


def bounds_close(a: Bounds, b: Bounds, tol: float = 1e-6) -> bool:
    return all(math.isclose(x, y, rel_tol=0.0, abs_tol=tol) for x, y in zip(a, b))


__all__ = [
    "GeoTransform", "Point", "Bounds", "bounds_to_geotransform", "corner_points",
    "geotransform_close", "bounds_close",
]
