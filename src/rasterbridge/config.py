# src/rasterbridge/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings. Does not touch disk or the engine.
    Built by composition.py (or by the caller) and handed to the services.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RASTERBRIDGE_",
        extra="forbid",
        frozen=True,
    )

    # --- georeferencing ---
    canonical_crs: str = "EPSG:4326"

    # --- engine ---
    vsi_prefix: str = "/vsimem/"
    large_image_threshold: int = Field(2 ** 31, gt=0)  # bytes; above it, copy row by row

    # --- output ---
    default_format: str = "GTiff"
    max_block_size: int = Field(2048, gt=0)
    deflate_level: int = Field(6, ge=1, le=9)
    temp_dir: Optional[Path] = None  # None -> system temp dir

    # --- logging ---
    log_level: str = "INFO"
    json_logs: bool = False

    # ----------------------------
    # Normalizers / validators
    # ----------------------------
    @field_validator("canonical_crs", "default_format", mode="before")
    @classmethod
    def _non_empty(cls, v: str, info) -> str:
        v2 = str(v).strip()
        if not v2:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v2

    @field_validator("canonical_crs", mode="after")
    @classmethod
    def _upper_authority(cls, v: str) -> str:
        # "epsg:4326" -> "EPSG:4326"; WKT and proj strings pass unchanged
        head, sep, code = v.partition(":")
        if sep and head.isalpha() and code.strip().isdigit():
            return f"{head.upper()}:{code.strip()}"
        return v

    @field_validator("vsi_prefix", mode="after")
    @classmethod
    def _trailing_slash(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"vsi_prefix must be absolute, got {v!r}")
        return v if v.endswith("/") else v + "/"

    @field_validator("log_level", mode="after")
    @classmethod
    def _level(cls, v: str) -> str:
        v2 = v.strip().upper()
        if v2 not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log_level: {v}")
        return v2

    @field_validator("temp_dir", mode="after")
    @classmethod
    def _abs_temp(cls, p: Optional[Path]) -> Optional[Path]:
        return None if p is None else p.expanduser().resolve()


def load_settings_from_yaml(path: Path | str, **overrides: Any) -> Settings:
    data: Mapping[str, Any] = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return Settings(**{**data, **overrides})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached instance (environment + .env). Tests must clear it:
        get_settings.cache_clear()
    """
    return Settings()


__all__ = ["Settings", "load_settings_from_yaml", "get_settings"]
