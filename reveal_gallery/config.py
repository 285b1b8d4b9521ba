"""
Configuration management for the gallery application.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Reveal Gallery API"
    API_VERSION: str = "0.1.0"
    API_DESCRIPTION: str = "Image gallery with progressive loading and an image access gateway"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    # Access event webhook
    # Leave empty to disable forwarding of access events
    WEBHOOK_URL: str = ""
    WEBHOOK_TIMEOUT_SECONDS: float = 5.0

    # Honor X-Forwarded-For when running behind a reverse proxy
    TRUST_PROXY: bool = True

    # Prefix applied by the gallery page to gateway-relative image paths
    API_BASE_URL: str = "http://localhost:3000"

    # Directory served by /view-image/{filename}
    IMAGE_DIR: str = "public/images"

    # JSON file with the image catalog; empty uses the packaged catalog
    CATALOG_PATH: str = ""

    # Gallery pagination
    BATCH_SIZE: int = 6
    LOAD_LATENCY_SECONDS: float = 1.5

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
