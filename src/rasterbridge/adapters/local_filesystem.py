# src/rasterbridge/adapters/local_filesystem.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from ..ports.filesystem import FileSystemPort, URI

_LOCAL_SCHEMES = ("", "file")


def _uri_path(uri: URI) -> Optional[Path]:
    """Local path a name points to, or None for non-local schemes."""
    parsed = urlparse(str(uri))
    # "C:\\x.tif" parses with a one-letter scheme
    if len(parsed.scheme) == 1:
        return Path(str(uri))
    if parsed.scheme not in _LOCAL_SCHEMES:
        return None
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(str(uri))


@dataclass(frozen=True)
class LocalFileSystem(FileSystemPort):
    """Plain paths and file:// URIs. Other schemes are not reachable from here."""

    def local_path(self, uri: URI) -> Optional[Path]:
        p = _uri_path(uri)
        if p is None or not p.exists():
            return None
        return p.expanduser().resolve()

    def read_bytes(self, uri: URI) -> bytes:
        p = _uri_path(uri)
        if p is None:
            raise FileNotFoundError(f"No filesystem registered for {uri}")
        return p.read_bytes()


__all__ = ["LocalFileSystem"]
