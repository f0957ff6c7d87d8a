"""
Application configuration.

All configuration is loaded from environment variables.
A local .env file is read first, so development settings
never need to live in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Finance Tracker"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")

    # The browser page is served from a different origin
    CORS_ORIGINS: list[str] = _split_csv(os.getenv("CORS_ORIGINS", "*"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./finance_tracker.db"
    )
    AUTO_CREATE_TABLES: bool = (
        os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"
    )

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
