"""
Provider capability interfaces.

The pipeline depends only on these two narrow interfaces so tests can swap in
deterministic fakes. EmbeddingProvider matches the async half of langchain's
Embeddings, so any langchain embedding model satisfies it as-is.

Dependencies: typing
System role: Contracts for external embedding and generation services
"""

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Turns text into fixed-dimension vectors."""

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts, one vector per input in the same order."""
        ...

    async def aembed_query(self, text: str) -> list[float]:
        """Embed a single search query."""
        ...


@runtime_checkable
class TextGenerator(Protocol):
    """Streams generated text for a prompt."""

    def astream(self, prompt: str) -> AsyncIterator[str]:
        """Yield text tokens in generation order."""
        ...
