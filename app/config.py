# app/config.py
"""
Application settings for the title catalogue.

Settings are plain pydantic models so that they can be constructed
directly in tests. ``Settings.from_env()`` reads ``SMGWIKI_*``
environment variables for deployment overrides and ``get_settings()``
caches a single instance for the FastAPI dependencies.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from typing_extensions import Literal

SortMode = Literal["date", "name", "random"]
LayoutMode = Literal["masonry", "grid", "list"]
LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

ENV_PREFIX = "SMGWIKI_"
DEFAULT_DATA_FILE = Path(__file__).resolve().parent / "data" / "titles.json"


class Settings(BaseModel):
    """Top-level settings shared by the store, the view layer and the routes."""

    data_file: Path = Field(default=DEFAULT_DATA_FILE, description="JSON file holding the title catalogue.")
    site_title: str = Field(default="司马光Wiki", description="Name shown in page headers and footers.")
    default_sort: SortMode = Field(default="date", description="Sort mode used when none is requested.")
    default_layout: LayoutMode = Field(default="masonry", description="Layout used when none is requested.")
    suggestion_limit: int = Field(default=5, ge=1, description="Maximum number of search suggestions.")
    suggestion_debounce_ms: int = Field(default=300, ge=0, description="Delay before suggestions are recomputed.")
    compact_header_offset: int = Field(default=50, ge=0, description="Scroll offset past which the header compacts.")
    back_to_top_offset: int = Field(default=400, ge=0, description="Scroll offset past which back-to-top is shown.")
    masonry_columns: int = Field(default=4, ge=1, description="Column count of the masonry layout.")
    grid_columns: int = Field(default=4, ge=1, description="Column count of the grid layout.")
    log_level: LogLevel = Field(default="INFO", description="Verbosity level for application logs.")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls) -> "Settings":
        """Instantiate settings, overriding fields from ``SMGWIKI_<FIELD>`` variables."""

        overrides = {}
        for name in cls.model_fields:
            value = os.environ.get(ENV_PREFIX + name.upper())
            if value is not None:
                overrides[name] = value
        return cls(**overrides)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


__all__ = ["Settings", "SortMode", "LayoutMode", "get_settings"]
