"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from backend.configs.providers import ProviderSettings
from backend.configs.rag import RAGSettings
from backend.configs.settings import Settings, get_settings

__all__ = ["ProviderSettings", "RAGSettings", "Settings", "get_settings"]
