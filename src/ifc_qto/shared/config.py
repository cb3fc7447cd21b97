"""Application configuration.

Uses pydantic-settings for environment variable support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: LOG_LEVEL, QTO_ROUND_DECIMALS, QTO_USE_GEOMETRY
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = Field(default="ifc_qto", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment name",
    )

    # =========================================================================
    # IFC Input
    # =========================================================================
    ifc_max_file_size_mb: int = Field(
        default=500,
        ge=1,
        le=2000,
        description="Maximum IFC file size in MB",
    )

    # =========================================================================
    # Quantity Takeoff
    # =========================================================================
    qto_round_decimals: int | None = Field(
        default=8,
        ge=0,
        le=10,
        description="Default decimal places for rounded output values",
    )
    qto_use_geometry: bool = Field(
        default=True,
        description="Derive missing Area/Volume from geometry by default",
    )
    qto_footprint_threshold: float = Field(
        default=0.95,
        gt=0.0,
        lt=1.0,
        description="Minimum |n_z| / |n| ratio for a triangle to count as horizontal",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    @property
    def ifc_max_file_size_bytes(self) -> int:
        """Maximum accepted IFC input size in bytes."""
        return self.ifc_max_file_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
