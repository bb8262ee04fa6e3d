"""Configuration settings for apifox-yapi."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://apifox.com/api/v1/shared-docs"


class Settings(BaseSettings):
    """Settings loaded from ``APIFOX_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="APIFOX_", env_file=".env", env_file_encoding="utf-8")

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
