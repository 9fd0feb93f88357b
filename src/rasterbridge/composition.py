# src/rasterbridge/composition.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import Settings, get_settings, load_settings_from_yaml
from .logging_setup import configure_logging
from .ports.filesystem import FileSystemPort
from .ports.raster_engine import RasterEnginePort
from .services.bridge import RasterDatasetBridge
from .services.georeference import GeoreferenceCalculator
from .services.lifecycle import DatasetLifecycle
from .services.persistence import TilePersistenceWriter


@dataclass(frozen=True)
class Services:
    engine: RasterEnginePort
    lifecycle: DatasetLifecycle
    bridge: RasterDatasetBridge
    georeference: GeoreferenceCalculator
    writer: TilePersistenceWriter


def build_services(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[RasterEnginePort] = None,
    filesystem: Optional[FileSystemPort] = None,
) -> Services:
    """Wire the services on one engine. Defaults: GDAL engine, local filesystem."""
    st = settings or get_settings()
    if engine is None:
        from .adapters.gdal_engine import GdalRasterEngine
        engine = GdalRasterEngine()
    if filesystem is None:
        from .adapters.local_filesystem import LocalFileSystem
        filesystem = LocalFileSystem()

    bridge = RasterDatasetBridge(engine, large_image_threshold=st.large_image_threshold)
    return Services(
        engine=engine,
        lifecycle=DatasetLifecycle(engine, filesystem, vsi_prefix=st.vsi_prefix),
        bridge=bridge,
        georeference=GeoreferenceCalculator(engine, canonical_crs=st.canonical_crs),
        writer=TilePersistenceWriter(
            engine, bridge,
            canonical_crs=st.canonical_crs,
            max_block_size=st.max_block_size,
            deflate_level=st.deflate_level,
            temp_dir=st.temp_dir,
            default_format=st.default_format,
        ),
    )


def build_from_yaml(
    path: Path,
    *,
    setup_logging: bool = True,
    engine: Optional[RasterEnginePort] = None,
    filesystem: Optional[FileSystemPort] = None,
) -> Services:
    st = load_settings_from_yaml(path)
    if setup_logging:
        configure_logging(level=st.log_level, json_logs=st.json_logs)
    return build_services(st, engine=engine, filesystem=filesystem)


__all__ = ["Services", "build_services", "build_from_yaml"]
