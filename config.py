"""
Configuration settings for the Ebisu recall model CLI.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Model Defaults
    # ========================================
    default_alpha: float = Field(
        default=4.0,
        gt=0.0,
        description="Alpha (and beta) of the prior for a newly learned fact",
    )

    # ========================================
    # Percentile Search
    # ========================================
    default_percentile: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Recall probability for percentile-decay queries (0.5 = half-life)",
    )
    percentile_tolerance: float = Field(
        default=1e-4,
        gt=0.0,
        description="Golden-section search tolerance in log-time",
    )
    minimizer_max_iterations: int = Field(
        default=10000,
        ge=1,
        description="Iteration cap for the golden-section search",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
