"""
Model provider configuration settings.

Credentials and model identifiers for the Google Gemini embedding and chat
models. The API key is required: constructing these settings without it
fails, which aborts application startup before any request is served.

Dependencies: pydantic, pydantic_settings
System role: Provider configuration for embeddings and generation
"""

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class ProviderSettings(BaseSettings):
    """Embedding and generation provider settings."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    google_api_key: SecretStr = Field(
        validation_alias="GOOGLE_API_KEY",
        description="API credential for the Gemini embedding and chat models",
    )
    chat_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini chat model used for streamed answers",
    )
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        description="Sampling temperature (0.0 for deterministic-leaning answers)",
    )
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        gt=0,
        description="Fixed output dimension requested for every embedding call",
    )
