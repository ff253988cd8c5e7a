"""
Configuration settings for Crop Tracker.

Uses Pydantic Settings to load environment variables for storage location,
logging, and display defaults.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_KEY = "crop_tracker_data"


class Settings(BaseSettings):
    # Storage
    storage_backend: Literal["file", "sqlite", "memory"] = Field(
        "file", alias="CROP_STORAGE_BACKEND"
    )
    data_dir: Path = Field(Path.home() / ".croptracker", alias="CROP_DATA_DIR")
    storage_key: str = Field(DEFAULT_STORAGE_KEY, alias="CROP_STORAGE_KEY")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Display defaults
    page_size: int = Field(20, alias="CROP_PAGE_SIZE", ge=1)
    currency_symbol: str = Field("₦", alias="CROP_CURRENCY_SYMBOL")
    number_decimals: int = Field(1, alias="CROP_NUMBER_DECIMALS", ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_STORAGE_KEY", "Settings", "get_settings"]
