"""Configuration settings for the scraping engine."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings, overridable through ``SCRAPE_RULES_*`` variables."""

    # Document parsing
    parser: str = "lxml"

    # Evaluation
    parallel: bool = False
    max_workers: Optional[int] = Field(default=None, ge=1)  # None -> cpu count
    default_cleaner: str = "identity"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_prefix="SCRAPE_RULES_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
