import logging

import pytest
from rasterbridge.contracts.errors import InvalidDataset
from rasterbridge.contracts.geo import Bounds, bounds_close
from rasterbridge.contracts.raster import NativeType
from rasterbridge.contracts.tiles import resolution

from tests.factories import FakeDataset

def _dataset(w, h, gt, projection="EPSG:4326"):
    ds = FakeDataset(w, h, 1, NativeType.BYTE)
    ds.geotransform = gt
    ds.projection = projection
    return ds

def test_canonical_dataset_bounds(georef):
    ds = _dataset(360, 180, (-180.0, 1.0, 0.0, 90.0, 0.0, -1.0))
    assert georef.bounds(ds) == Bounds(-180.0, -90.0, 180.0, 90.0)

def test_bounds_are_reprojected(georef):
    ds = _dataset(10, 10, (0.0, 1.0, 0.0, 10.0, 0.0, -1.0), projection="offset:5,-2")
    assert bounds_close(georef.bounds(ds), Bounds(5.0, -2.0, 15.0, 8.0))

def test_missing_projection_is_taken_as_canonical(georef, caplog):
    ds = _dataset(4, 2, (10.0, 0.5, 0.0, 20.0, 0.0, -0.5), projection="")
    with caplog.at_level(logging.DEBUG, logger="rasterbridge.services.georeference"):
        b = georef.bounds(ds)
    assert b == Bounds(10.0, 19.0, 12.0, 20.0)
    assert "using dataset coordinates" in caplog.text

def test_unknown_projection_falls_back_to_identity(georef):
    ds = _dataset(4, 2, (10.0, 0.5, 0.0, 20.0, 0.0, -0.5), projection="LOCAL_CS[\"x\"]")
    assert georef.bounds(ds) == Bounds(10.0, 19.0, 12.0, 20.0)

def test_rotation_terms_do_not_move_corners(georef):
    ds = _dataset(2, 2, (0.0, 1.0, -1.0, 0.0, -1.0, -1.0))
    assert georef.bounds(ds) == Bounds(0.0, -2.0, 2.0, 0.0)

def test_south_up_grid_still_has_south_below_north(georef):
    ds = _dataset(4, 4, (0.0, 1.0, 0.0, -4.0, 0.0, 1.0))
    b = georef.bounds(ds)
    assert b.south < b.north
    assert b == Bounds(0.0, -4.0, 4.0, 0.0)

def test_pixel_size_is_positive(georef):
    ds = _dataset(100, 50, (0.0, 0.25, 0.0, 0.0, 0.0, -0.5))
    assert georef.pixel_size(ds) == pytest.approx((0.25, 0.5))

def test_zoom_level_uses_finer_axis(georef):
    px = resolution(6, 256)
    ds = _dataset(256, 256, (0.0, px, 0.0, 0.0, 0.0, -px * 2))
    assert georef.zoom_level(ds, 256) == 6

def test_canonical_wkt_comes_from_engine(georef):
    assert georef.canonical_wkt == "EPSG:4326"

def test_null_dataset(georef):
    with pytest.raises(InvalidDataset):
        georef.bounds(None)
