import pytest
from rasterbridge.contracts.geo import Bounds, bounds_close
from rasterbridge.contracts.tiles import MAX_ZOOM, TileCoordinate, resolution, tile_bounds, zoom_for_pixel_size

def test_zoom_one_is_two_hemispheres():
    assert tile_bounds(0, 0, 1, 256) == Bounds(-180.0, -90.0, 0.0, 90.0)
    assert tile_bounds(1, 0, 1, 256) == Bounds(0.0, -90.0, 180.0, 90.0)

def test_resolution_halves_per_zoom():
    assert resolution(1, 512) == pytest.approx(180.0 / 512)
    assert resolution(4, 512) == pytest.approx(resolution(3, 512) / 2)

def test_tile_bounds_at_zoom_three():
    b = TileCoordinate(tx=5, ty=2, zoom=3, tile_size=256).bounds()
    assert bounds_close(b, Bounds(45.0, 0.0, 90.0, 45.0))

def test_zoom_for_pixel_size_roundtrips_resolution():
    for z in (1, 5, 12):
        assert zoom_for_pixel_size(resolution(z, 256), 256) == z
    # finer than the next level up
    assert zoom_for_pixel_size(resolution(7, 256) * 0.9, 256) == 8
    assert zoom_for_pixel_size(1e-12, 256) == MAX_ZOOM

@pytest.mark.parametrize("args", [(0, 0, 0, 256), (4, 0, 2, 256), (0, 2, 2, 256), (0, 0, 1, 0)])
def test_tile_coordinate_validates(args):
    with pytest.raises(ValueError):
        TileCoordinate(*args)
