"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from backend.configs.base import AppSettings
from backend.configs.providers import ProviderSettings
from backend.configs.rag import RAGSettings


class Settings(AppSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings, resolved when Settings() is constructed
    rag: RAGSettings = Field(default_factory=RAGSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once, on first call. A missing
    GOOGLE_API_KEY raises pydantic.ValidationError here.

    Returns:
        Settings: Application settings instance

    Usage:
        from backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()
