import os
import pytest
from rasterbridge.config import get_settings
from rasterbridge.services.bridge import RasterDatasetBridge
from rasterbridge.services.georeference import GeoreferenceCalculator
from rasterbridge.services.lifecycle import DatasetLifecycle
from rasterbridge.services.persistence import TilePersistenceWriter

from tests.factories import FakeFileSystem, FakeRasterEngine

def pytest_configure():
    os.environ.setdefault("RASTERBRIDGE_CANONICAL_CRS", "EPSG:4326")

@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # no settings state leaks between tests
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

@pytest.fixture
def engine():
    return FakeRasterEngine()

@pytest.fixture
def filesystem():
    return FakeFileSystem()

@pytest.fixture
def bridge(engine):
    return RasterDatasetBridge(engine)

@pytest.fixture
def georef(engine):
    return GeoreferenceCalculator(engine, canonical_crs="EPSG:4326")

@pytest.fixture
def writer(engine, bridge):
    return TilePersistenceWriter(engine, bridge, canonical_crs="EPSG:4326")

@pytest.fixture
def lifecycle(engine, filesystem):
    return DatasetLifecycle(engine, filesystem)

def pytest_collection_modifyitems(items):
    for item in items:
        if "integration" in item.keywords and os.environ.get("CI") == "true":
            item.add_marker(pytest.mark.slow)
