# src/rasterbridge/contracts/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class EngineError:
    """Last error reported by the native engine (code, class and message)."""
    code: int = 0
    error_type: int = 0
    message: str = ""

    def __str__(self) -> str:
        return f"{self.code}: {self.error_type}: {self.message}"


class RasterBridgeError(Exception):
    """Base of every error raised by rasterbridge."""


class UnsupportedPixelType(RasterBridgeError):
    def __init__(self, pixel_type: Any):
        self.pixel_type = pixel_type
        super().__init__(f"Unsupported raster pixel type: {pixel_type!r}")


class InvalidDataset(RasterBridgeError):
    def __init__(self, message: str = "Dataset is null"):
        super().__init__(message)


class DatasetOpenError(RasterBridgeError):
    """Wraps any failure while opening `name`. The original error is `__cause__`."""

    def __init__(self, name: str, cause: Optional[BaseException] = None):
        self.name = name
        self.cause = cause
        msg = f"Error opening image file: {name}"
        if cause is not None:
            msg += f" ({cause})"
        super().__init__(msg)


class RasterWriteError(RasterBridgeError):
    def __init__(self, path: str, error: EngineError):
        self.path = path
        self.code = error.code
        self.error_type = error.error_type
        self.engine_message = error.message
        super().__init__(f"Error saving raster: {path} ({error})")


class TempFileCleanupError(RasterBridgeError, OSError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Error deleting temporary file: {path}")


class ProjectionError(RasterBridgeError):
    """A coordinate transformation could not be built."""


class UnsupportedOperandError(RasterBridgeError):
    """Something that is neither a Raster nor an engine dataset was handed to a raster operation."""

    def __init__(self, operand: Any):
        self.operand = operand
        super().__init__(f"Unsupported operand, expected a raster or dataset: {type(operand).__name__}")


__all__ = [
    "EngineError", "RasterBridgeError", "UnsupportedPixelType", "InvalidDataset",
    "DatasetOpenError", "RasterWriteError", "TempFileCleanupError",
    "ProjectionError", "UnsupportedOperandError",
]
