"""
Google Gemini provider adapters.

FixedDimensionEmbeddings pins the output dimensionality on every call (the base
class ignores output_dimensionality in the constructor). GeminiTextGenerator
adapts ChatGoogleGenerativeAI to the TextGenerator interface, flattening
message chunks into plain text tokens.

Dependencies: langchain_google_genai, langchain_core
System role: Default embedding and generation providers
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings

from backend.configs.providers import ProviderSettings

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings wrapper with fixed output dimensionality.

    Chunks and queries must land in the same vector space, so every async
    embed call uses the configured dimension unless the caller overrides it.
    """

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 768,
        **kwargs: Any,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Fixed dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    async def aembed_documents(
        self,
        texts: list[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: list[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> list[list[float]]:
        """Embed documents with the configured dimension."""
        return await super().aembed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type,
            titles=titles,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )

    async def aembed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> list[float]:
        """Embed a query with the configured dimension."""
        return await super().aembed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )


def content_to_text(content: Any) -> str:
    """Flatten chat chunk content (string or list of parts) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content) if content else ""


class GeminiTextGenerator:
    """Streaming text generator backed by a langchain chat model."""

    def __init__(self, model: BaseChatModel) -> None:
        """
        Args:
            model: Chat model; Gemini in production, any BaseChatModel works
        """
        self._model = model

    async def astream(self, prompt: str) -> AsyncIterator[str]:
        """
        Stream answer tokens for a fully rendered prompt.

        Args:
            prompt: Prompt text sent as a single user turn

        Yields:
            str: Non-empty text tokens in generation order
        """
        async for chunk in self._model.astream(prompt):
            token = content_to_text(chunk.content)
            if token:
                yield token


def build_embeddings(settings: ProviderSettings) -> FixedDimensionEmbeddings:
    """Create the Gemini embedding provider from settings."""
    return FixedDimensionEmbeddings(
        model=settings.embedding_model,
        output_dimensionality=settings.embedding_dimension,
        google_api_key=settings.google_api_key,
    )


def build_text_generator(settings: ProviderSettings) -> GeminiTextGenerator:
    """Create the Gemini streaming generator from settings."""
    model = ChatGoogleGenerativeAI(
        model=settings.chat_model,
        temperature=settings.temperature,
        google_api_key=settings.google_api_key,
    )
    logger.info(
        f"{__name__}:build_text_generator - model={settings.chat_model}, temperature={settings.temperature}"
    )
    return GeminiTextGenerator(model)
