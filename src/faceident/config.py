"""Environment-based configuration for faceident."""

from __future__ import annotations

from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from FACEIDENT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FACEIDENT_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8083
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Authentication (None = disabled)
    api_key: str | None = None

    # Detector acceptance (used by the descriptor source only)
    min_confidence: float = Field(default=0.3, ge=0.0, le=1.0)

    # Matching
    match_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    hash_bits: int = Field(default=64, ge=1)
    hamming_threshold: int = Field(default=8, ge=0)
    filter_cutover: int = Field(default=1000, ge=0)
    top_k: int = Field(default=5, ge=1)

    # Embedder output and synthetic fallback
    descriptor_dim: int = Field(default=128, ge=1)
    synthetic_low: float = 0.25
    synthetic_high: float = 0.75
    synthetic_confidence: float = Field(default=0.8, ge=0.0, le=1.0)

    # Concurrency
    max_concurrent: int = Field(default=2, ge=1)

    @model_validator(mode="after")
    def _check_synthetic_range(self) -> Self:
        if self.synthetic_low > self.synthetic_high:
            raise ValueError("synthetic_low must not exceed synthetic_high")
        return self


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
