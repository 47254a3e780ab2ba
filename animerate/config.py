"""Application configuration using Pydantic Settings.

This module centralizes all configuration values that may vary between environments.
Values can be overridden via environment variables or .env file.
"""
from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # ===== Storage =====
    STORAGE_BACKEND: Literal["memory", "file", "db"] = "memory"
    RATINGS_FILE_PATH: str = "data/ratings.json"
    DATABASE_URL: str = "sqlite:///data/animerate.db"
    STORAGE_LOCK_TIMEOUT_SECONDS: float = 10.0
    STORAGE_RETRY_ATTEMPTS: int = 3
    STORAGE_RETRY_BASE_DELAY_SECONDS: float = 0.05

    # ===== Rating Categories =====
    CATEGORIES_FILE_PATH: str = "data/rating-categories.json"
    REQUIRE_RATED_CATEGORY: bool = False

    # ===== Implicit User =====
    DEFAULT_USER_ID: int = 1
    DEFAULT_USERNAME: str = "default"

    # ===== Catalog Provider =====
    JIKAN_API_BASE_URL: str = "https://api.jikan.moe/v4"
    ANILIST_API_URL: str = "https://graphql.anilist.co"
    API_TIMEOUT_SECONDS: float = 30.0
    CATALOG_REQUEST_DELAY_SECONDS: float = 0.3
    CATALOG_DETAILS_DELAY_SECONDS: float = 1.0
    CATALOG_RATE_LIMIT_RETRY_SECONDS: float = 2.0
    RECOMMENDATION_LIMIT: int = 10
    SEARCH_PAGE_SIZE: int = 12

    # ===== HTTP =====
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # ===== Logging =====
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        # Allow extra fields from .env that aren't defined here
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache so settings are loaded once per process.
    """
    return Settings()
