"""
Shared test fixtures and configuration for entire test suite.

Provides: deterministic provider fakes, corpus files, chunk factories and a
fully wired service container.
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import asyncio
import hashlib
import re
from collections.abc import AsyncIterator, Callable
from pathlib import Path

import pytest

from backend.api.deps import ServiceContainer
from backend.configs import ProviderSettings, RAGSettings, Settings
from backend.models.chunk import Chunk

ZERODHA_SENTENCE = "Zerodha charges zero brokerage on equity delivery trades."
ZERODHA_QUERY = "What is the brokerage for delivery trades?"

_STOPWORDS = {"a", "an", "and", "are", "for", "in", "is", "of", "on", "the", "to", "what"}


def keyword_vector(text: str, dim: int = 512) -> list[float]:
    """Hashed bag-of-words vector; texts sharing keywords score higher."""
    values = [0.0] * dim
    for token in re.findall(r"[a-z0-9]+", text.lower()):
        if token in _STOPWORDS:
            continue
        digest = hashlib.sha256(token.encode("utf-8")).digest()
        values[int.from_bytes(digest[:4], "big") % dim] += 1.0
    return values


class KeywordEmbeddings:
    """Deterministic embedding provider that records every call."""

    def __init__(
        self,
        fail: bool = False,
        delay: float = 0.0,
        dim: int = 512,
        error: Exception | None = None,
    ) -> None:
        self.fail = fail
        self.error = error
        self.delay = delay
        self.dim = dim
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        await asyncio.sleep(self.delay)
        if self.fail:
            raise self.error or RuntimeError("embedding service unreachable")
        return [keyword_vector(text, self.dim) for text in texts]

    async def aembed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        await asyncio.sleep(self.delay)
        if self.fail:
            raise self.error or RuntimeError("embedding service unreachable")
        return keyword_vector(text, self.dim)


class UpstreamHTTPError(Exception):
    """Provider SDK error carrying an HTTP status, like a quota rejection."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConstantEmbeddings:
    """Embeds every text to the same vector, so every score ties."""

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return [[1.0, 0.0] for _ in texts]

    async def aembed_query(self, text: str) -> list[float]:
        return [1.0, 0.0]


class ScriptedGenerator:
    """Generation provider that streams a fixed token script."""

    def __init__(
        self,
        tokens: tuple[str, ...] = ("Zerodha ", "charges ", "zero ", "brokerage ", "on delivery."),
        fail_after: int | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.tokens = tokens
        self.fail_after = fail_after
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []
        self.tokens_sent = 0
        self.closed = False

    @property
    def full_text(self) -> str:
        return "".join(self.tokens)

    async def astream(self, prompt: str) -> AsyncIterator[str]:
        self.prompts.append(prompt)
        try:
            for index, token in enumerate(self.tokens):
                if self.fail_after is not None and index == self.fail_after:
                    raise self.error or RuntimeError("generation stream dropped")
                await asyncio.sleep(self.delay)
                self.tokens_sent += 1
                yield token
        finally:
            self.closed = True


@pytest.fixture
def embeddings() -> KeywordEmbeddings:
    """Provide recording keyword embeddings."""
    return KeywordEmbeddings()


@pytest.fixture
def generator() -> ScriptedGenerator:
    """Provide scripted generator with the default token script."""
    return ScriptedGenerator()


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    """Write the single-sentence corpus used by end-to-end scenarios."""
    path = tmp_path / "corpus.txt"
    path.write_text(ZERODHA_SENTENCE, encoding="utf-8")
    return path


@pytest.fixture
def make_chunk() -> Callable[..., Chunk]:
    """Factory for standalone chunks."""

    def _make(text: str, ordinal: int = 0, document_id: str = "doc") -> Chunk:
        return Chunk(
            id=f"{document_id}:{ordinal}",
            text=text,
            ordinal=ordinal,
            source_document_id=document_id,
            start_index=0,
        )

    return _make


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Factory for settings that never read GOOGLE_API_KEY from the environment."""

    def _make(corpus_path: Path, **rag_overrides) -> Settings:
        return Settings(
            rag=RAGSettings(corpus_path=corpus_path, **rag_overrides),
            providers=ProviderSettings(GOOGLE_API_KEY="test-key"),
        )

    return _make


@pytest.fixture
def services(
    make_settings: Callable[..., Settings],
    corpus_file: Path,
    embeddings: KeywordEmbeddings,
    generator: ScriptedGenerator,
) -> ServiceContainer:
    """Fully wired service container backed by the fakes."""
    return ServiceContainer.from_components(
        make_settings(corpus_file),
        embeddings=embeddings,
        generator=generator,
    )


@pytest.fixture
def embeddings_factory() -> type[KeywordEmbeddings]:
    """Provide the keyword embeddings class for custom configurations."""
    return KeywordEmbeddings


@pytest.fixture
def constant_embeddings() -> ConstantEmbeddings:
    """Provide embeddings under which every chunk ties."""
    return ConstantEmbeddings()


@pytest.fixture
def generator_factory() -> type[ScriptedGenerator]:
    """Provide the scripted generator class for custom configurations."""
    return ScriptedGenerator


@pytest.fixture
def make_services(make_settings: Callable[..., Settings]) -> Callable[..., ServiceContainer]:
    """Factory for service containers with custom providers or corpus."""

    def _make(corpus_path: Path, embeddings, generator, **rag_overrides) -> ServiceContainer:
        return ServiceContainer.from_components(
            make_settings(corpus_path, **rag_overrides),
            embeddings=embeddings,
            generator=generator,
        )

    return _make


@pytest.fixture
def zerodha_sentence() -> str:
    return ZERODHA_SENTENCE


@pytest.fixture
def zerodha_query() -> str:
    return ZERODHA_QUERY


@pytest.fixture
def upstream_http_error() -> type[UpstreamHTTPError]:
    """Provide the status-carrying provider error class."""
    return UpstreamHTTPError
