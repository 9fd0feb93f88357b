# src/rasterbridge/services/lifecycle.py
from __future__ import annotations

import logging
import posixpath
import secrets
import string
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional

from ..contracts.errors import DatasetOpenError, InvalidDataset
from ..ports.filesystem import FileSystemPort
from ..ports.raster_engine import Dataset, RasterEnginePort

log = logging.getLogger(__name__)

VSI_PREFIX = "/vsimem/"
_ALPHANUMERIC = string.ascii_letters + string.digits
_NOT_LOADED = ("Image not loaded, but no exception was raised either; "
               "look for an engine explanation logged above (%s)")


def random_name(length: int = 5) -> str:
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


@dataclass(frozen=True)
class DatasetLifecycle:
    """Open/close of engine datasets from local paths, URIs and byte streams.

    Non-local images are copied into engine virtual memory files; `close`
    unlinks them. Every successful `open` must be paired with one `close`;
    `opened` / `opened_stream` do that pairing.
    """
    engine: RasterEnginePort
    filesystem: FileSystemPort
    vsi_prefix: str = VSI_PREFIX

    # --------- open ---------
    def open(self, name: str) -> Optional[Dataset]:
        """Open `name`; `None` when the engine declines without raising."""
        try:
            log.debug("Loading image: %s", name)
            local = self.filesystem.local_path(name)
            if local is not None:
                ds = self.engine.open(str(local))
                if ds is not None:
                    log.debug("  Image loaded successfully: %s", name)
                    return ds

            data = self.filesystem.read_bytes(name)
            # one memory file per handle; the base name keeps its extension for driver probing
            vsiname = f"{self.vsi_prefix}{random_name()}/{posixpath.basename(str(name).rstrip('/'))}"
            return self._open_memory(vsiname, data, name)
        except Exception as e:
            raise DatasetOpenError(str(name), e) from e

    def open_stream(self, stream: BinaryIO) -> Optional[Dataset]:
        name = "stream" + random_name()
        try:
            data = stream.read()
            return self._open_memory(self.vsi_prefix + name, data, name)
        except Exception as e:
            raise DatasetOpenError(name, e) from e

    def _open_memory(self, vsiname: str, data: bytes, name: str) -> Optional[Dataset]:
        self.engine.register_memory_file(vsiname, data)
        try:
            ds = self.engine.open(vsiname)
        except BaseException:
            self.engine.unlink(vsiname)
            raise
        if ds is not None:
            log.debug("  Image loaded successfully: %s", name)
            return ds
        # nothing refers to the memory file any more
        self.engine.unlink(vsiname)
        log.info(_NOT_LOADED, name)
        return None

    # --------- close ---------
    def close(self, ds: Dataset) -> None:
        if ds is None:
            raise InvalidDataset()
        files: List[str] = list(self.engine.file_list(ds))
        self.engine.close(ds)
        for f in files:
            if f.startswith(self.vsi_prefix):
                self.engine.unlink(f)

    # --------- scoped ---------
    @contextmanager
    def opened(self, name: str) -> Iterator[Dataset]:
        ds = self.open(name)
        if ds is None:
            raise InvalidDataset(f"Image could not be loaded: {name}")
        try:
            yield ds
        finally:
            self.close(ds)

    @contextmanager
    def opened_stream(self, stream: BinaryIO) -> Iterator[Dataset]:
        ds = self.open_stream(stream)
        if ds is None:
            raise InvalidDataset("Image could not be loaded from stream")
        try:
            yield ds
        finally:
            self.close(ds)

    # --------- helpers ---------
    def is_valid_dataset(self, name: str) -> bool:
        try:
            ds = self.open(name)
        except DatasetOpenError:
            return False
        if ds is None:
            return False
        self.close(ds)
        return True

    def nodatas(self, name: str) -> List[Optional[float]]:
        """Per-band no-data of image `name` (None where a band has none)."""
        ds = self.open(name)
        if ds is None:
            raise DatasetOpenError(str(name))
        try:
            _, _, bands = self.engine.size(ds)
            return [self.engine.get_nodata(ds, b) for b in range(1, bands + 1)]
        finally:
            self.close(ds)


__all__ = ["VSI_PREFIX", "random_name", "DatasetLifecycle"]
