"""Application configuration and .env loading."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized runtime configuration."""

    data_dir: Path = Field(default=Path("data"), validation_alias="DATA_DIR")

    psi_api_key: str | None = Field(default=None, validation_alias="PSI_API_KEY")
    psi_endpoint: str = Field(
        default="https://www.googleapis.com/pagespeedonline/v5/runPagespeed",
        validation_alias="PSI_ENDPOINT",
    )
    psi_strategy: str = Field(default="mobile", validation_alias="PSI_STRATEGY")
    psi_timeout: float = Field(default=120.0, validation_alias="PSI_TIMEOUT")

    max_reports: int = Field(default=10, ge=1, validation_alias="MAX_REPORTS")
    delete_batch_size: int = Field(
        default=20, ge=1, validation_alias="DELETE_BATCH_SIZE"
    )
    cache_ttl_seconds: int | None = Field(
        default=None, ge=1, validation_alias="CACHE_TTL_SECONDS"
    )
    retention_days: int = Field(default=90, ge=1, validation_alias="RETENTION_DAYS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
