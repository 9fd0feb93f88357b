import pytest
from rasterbridge.contracts.geo import (
    Bounds, bounds_to_geotransform, corner_points, geotransform_close,
)

def test_bounds_to_geotransform_northwest_origin():
    gt = bounds_to_geotransform(Bounds(-10.0, 20.0, 30.0, 40.0), width=400, height=100)
    assert geotransform_close(gt, (-10.0, 0.1, 0.0, 40.0, 0.0, -0.2))

def test_corner_points_cover_the_grid():
    gt = (100.0, 2.0, 0.0, 50.0, 0.0, -1.0)
    c1, c2, c3, c4 = corner_points(gt, width=10, height=5)
    assert c1 == (100.0, 50.0)
    assert c2 == (120.0, 45.0)
    assert c3 == (120.0, 50.0)
    assert c4 == (100.0, 45.0)

def test_bounds_from_points_is_min_max():
    b = Bounds.from_points([(3, -1), (-2, 4), (0, 0)])
    assert b == Bounds(-2, -1, 3, 4)
    assert (b.width, b.height) == (5, 5)
    with pytest.raises(ValueError):
        Bounds.from_points([])
