"""
Engine Configuration

All settings loaded from environment variables (prefix ``MTF_``).
"""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MTF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Scoring
    min_candles: int = Field(default=50, ge=1)

    # Harmonization
    harmonizer_confidence_threshold: float = Field(default=75.0, ge=0, le=100)
    influence_step: float = Field(default=0.05, ge=0, le=1)
    max_influence: float = Field(default=0.3, ge=0, le=1)
    # Lower timeframe adopts the higher direction only above this influence
    direction_propagation_threshold: float = Field(default=0.25, ge=0, le=1)

    # Memoization
    cache_max_entries: int = Field(default=100, ge=1)
    cache_price_precision: int = Field(default=2, ge=0)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
