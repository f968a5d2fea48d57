"""Runtime settings loaded from ``TAXMATE_*`` environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from taxmate.taxes.year import DEFAULT_TAX_YEAR


def _default_store_path() -> Path:
    return Path.home() / ".taxmate" / "calculations.json"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TAXMATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    store_path: Path = Field(default_factory=_default_store_path)
    """JSON file holding saved calculations."""

    tax_year: str = DEFAULT_TAX_YEAR
    """Label of the tax-year table used for estimates."""

    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()
