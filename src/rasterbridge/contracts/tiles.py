# src/rasterbridge/contracts/tiles.py

from __future__ import annotations

from dataclasses import dataclass

from .geo import Bounds

"""
Geodetic TMS tiling (EPSG:4326). Zoom 1 covers the world with 2x1 tiles;
each further zoom halves the pixel size. Tile (0, 0) is the southwest tile.
"""

MAX_ZOOM = 22
EPSILON = 1e-8


def resolution(zoom: int, tile_size: int) -> float:
    """Degrees per pixel at `zoom` for square tiles of `tile_size` pixels."""
    if zoom < 1:
        raise ValueError(f"zoom must be >= 1, got {zoom}")
    if tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {tile_size}")
    return 180.0 / tile_size / (2 ** (zoom - 1))


def tile_bounds(tx: int, ty: int, zoom: int, tile_size: int) -> Bounds:
    span = resolution(zoom, tile_size) * tile_size
    return Bounds(
        tx * span - 180.0,
        ty * span - 90.0,
        (tx + 1) * span - 180.0,
        (ty + 1) * span - 90.0,
    )


def zoom_for_pixel_size(pixel_size: float, tile_size: int) -> int:
    """Lowest zoom whose resolution is at least as fine as `pixel_size`."""
    for zoom in range(1, MAX_ZOOM + 1):
        if resolution(zoom, tile_size) - pixel_size <= EPSILON:
            return zoom
    return MAX_ZOOM


@dataclass(frozen=True)
class TileCoordinate:
    tx: int
    ty: int
    zoom: int
    tile_size: int

    def __post_init__(self):
        if self.zoom < 1:
            raise ValueError(f"zoom must be >= 1, got {self.zoom}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        limit_x = 2 ** self.zoom
        limit_y = 2 ** (self.zoom - 1)
        if not (0 <= self.tx < limit_x and 0 <= self.ty < limit_y):
            raise ValueError(f"tile ({self.tx}, {self.ty}) outside zoom {self.zoom} grid {limit_x}x{limit_y}")

    def bounds(self) -> Bounds:
        return tile_bounds(self.tx, self.ty, self.zoom, self.tile_size)


__all__ = ["MAX_ZOOM", "resolution", "tile_bounds", "zoom_for_pixel_size", "TileCoordinate"]
