"""
Application settings using Pydantic.

Provides environment-based configuration loading with AXADVISOR_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AXADVISOR_",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json | console

    # Threshold file (YAML); searched in default locations when unset
    config_path: str | None = None

    # Planning overrides; None keeps the threshold file value
    top_n: int | None = None
    phase_interval_days: int | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
