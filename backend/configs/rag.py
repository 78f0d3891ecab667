"""
Retrieval pipeline configuration settings.

Corpus location, chunking parameters, retrieval depth and response cache bounds.

Dependencies: pydantic, pydantic_settings
System role: Configuration for ingestion, indexing, retrieval and caching
"""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class RAGSettings(BaseSettings):
    """Settings for the retrieval-and-generation pipeline."""

    model_config = SettingsConfigDict(env_prefix="RAG_")

    corpus_path: Path = Field(
        default=Path("data/corpus.txt"),
        description="Plain-text corpus file, read once when the index is built",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Maximum overlap copied from the end of the previous chunk",
    )

    # Retrieval settings
    top_k: int = Field(default=3, ge=1, description="Number of chunks used as grounding context")
    embedding_batch_size: int = Field(
        default=100,
        ge=1,
        description="Chunks sent per embedding provider call during the build",
    )

    # Response cache
    cache_max_entries: int | None = Field(
        default=None,
        ge=1,
        description="Bound the response cache with LRU eviction (unbounded when unset)",
    )

    warm_index_on_startup: bool = Field(
        default=False,
        description="Start the index build during application startup instead of on first request",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "RAGSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than chunk_size ({self.chunk_size})"
            )
        return self
