"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (only used when the internal logo repository is enabled)
    DATABASE_URL: str = "sqlite:///./svglogos.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    # API
    API_TITLE: str = "SVG Logos"
    API_VERSION: str = "1.0.0"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
