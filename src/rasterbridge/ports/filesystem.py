# src/rasterbridge/ports/filesystem.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

URI = str

@runtime_checkable
class FileSystemPort(Protocol):
    """
    Resolves image names (plain paths or URIs) for the dataset lifecycle.
    """
    def local_path(self, uri: URI) -> Optional[Path]: ...  # existing local file, canonical; else None
    def read_bytes(self, uri: URI) -> bytes: ...

__all__ = ["FileSystemPort", "URI"]
