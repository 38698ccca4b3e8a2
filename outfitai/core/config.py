"""Configuration management for the OutfitAI application.

This module handles all configuration aspects of the application including:
- Environment variable loading and validation using Pydantic
- Model provider settings (API key, model names, timeouts)
- Upload limits for incoming clothing photos
- Environment-specific configurations

Settings are read once per process and cached; tests clear the cache through
``get_settings.cache_clear()`` after changing the environment.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from enum import Enum


class EnvironmentType(str, Enum):
    """Environment types for configuration management"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Main application settings with environment-specific configurations"""

    # Basic application settings
    APP_NAME: str = "OutfitAI"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # HTTP settings
    ALLOWED_ORIGINS: List[str] = ["*"]
    API_V1_PREFIX: str = "/api/v1"
    DOCS_URL: Optional[str] = "/docs"

    # Model provider settings
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    VISION_MODEL: str = "gpt-4o-mini"
    TEXT_MODEL: str = "gpt-4o-mini"
    IMAGE_MODEL: str = "gpt-image-1"
    IMAGE_SIZE: str = "1024x1536"
    MODEL_TIMEOUT_SECONDS: float = 60.0

    # Pipeline settings
    EXPECTED_SUGGESTION_COUNT: int = 3
    STRICT_SUGGESTION_COUNT: bool = False

    # Upload settings
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/png", "image/webp"]

    @property
    def PROD(self) -> bool:
        """Check if environment is production"""
        return self.ENVIRONMENT == EnvironmentType.PRODUCTION

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()
