"""
Dependency injection container.

Builds the process-wide RAG service graph once (at application startup) and
exposes FastAPI dependency factories that read it from app state. Nothing is
constructed at import time.

Dependencies: backend.configs, backend.core.rag, backend.boundary.providers
System role: DI container for service injection
"""

import logging

from fastapi import Request

from backend.boundary.providers.protocols import EmbeddingProvider, TextGenerator
from backend.configs import Settings
from backend.core.rag import (
    Chunker,
    CorpusIndexBuilder,
    GenerationPipeline,
    InitializationGate,
    ResponseCache,
)

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Owns the long-lived RAG components shared by all requests."""

    def __init__(
        self,
        gate: InitializationGate,
        cache: ResponseCache,
        pipeline: GenerationPipeline,
        warm_index: bool = False,
    ) -> None:
        self.gate = gate
        self.cache = cache
        self.pipeline = pipeline
        self.warm_index = warm_index

    @classmethod
    def from_components(
        cls,
        settings: Settings,
        embeddings: EmbeddingProvider,
        generator: TextGenerator,
    ) -> "ServiceContainer":
        """
        Wire the service graph around the given providers.

        Args:
            settings: Application settings
            embeddings: Embedding provider used for the build and for queries
            generator: Streaming text generator

        Returns:
            ServiceContainer: Container with an unbuilt index
        """
        rag = settings.rag
        builder = CorpusIndexBuilder(
            corpus_path=rag.corpus_path,
            chunker=Chunker(chunk_size=rag.chunk_size, chunk_overlap=rag.chunk_overlap),
            embeddings=embeddings,
            batch_size=rag.embedding_batch_size,
        )
        gate = InitializationGate(builder)
        cache = ResponseCache(max_entries=rag.cache_max_entries)
        pipeline = GenerationPipeline(gate=gate, cache=cache, generator=generator, top_k=rag.top_k)
        return cls(
            gate=gate,
            cache=cache,
            pipeline=pipeline,
            warm_index=rag.warm_index_on_startup,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        """Wire the service graph with the Google Gemini providers."""
        from backend.boundary.providers.google_genai import build_embeddings, build_text_generator

        logger.info(f"{__name__}:from_settings - Creating Gemini providers")
        return cls.from_components(
            settings,
            embeddings=build_embeddings(settings.providers),
            generator=build_text_generator(settings.providers),
        )

    async def close(self) -> None:
        """Release resources at shutdown."""
        await self.gate.close()


def get_services(request: Request) -> ServiceContainer:
    """Get the service container created during application startup."""
    return request.app.state.services


def get_generation_pipeline(request: Request) -> GenerationPipeline:
    """Get the shared generation pipeline."""
    return get_services(request).pipeline


def get_initialization_gate(request: Request) -> InitializationGate:
    """Get the shared index initialization gate."""
    return get_services(request).gate
