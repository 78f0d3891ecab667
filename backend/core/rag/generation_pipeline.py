"""
Grounded generation pipeline.

Answers a question from the corpus: cache lookup, index readiness, top-k
retrieval, prompt assembly, then a streamed generation that is forwarded to
the caller while it accumulates for the cache.

Dependencies: backend.core.rag, backend.boundary.providers
System role: Request-level RAG orchestration
"""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing

from backend.boundary.providers.protocols import TextGenerator
from backend.core.rag.initialization_gate import InitializationGate
from backend.core.rag.prompt import build_prompt
from backend.core.rag.response_cache import ResponseCache
from backend.core.rag.stream_tee import StreamTee
from backend.models.chat import Message
from backend.models.chunk import SearchResult

logger = logging.getLogger(__name__)


class GenerationPipeline:
    """
    Retrieval-augmented answer generation.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        gate: InitializationGate,
        cache: ResponseCache,
        generator: TextGenerator,
        top_k: int = 3,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            gate: Initialization gate owning the embedding index
            cache: Response cache keyed by question text
            generator: Streaming text generation provider
            top_k: Number of chunks used as grounding context
        """
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        self.gate = gate
        self.cache = cache
        self.generator = generator
        self.top_k = top_k

    async def retrieve(self, question: str) -> list[SearchResult]:
        """
        Retrieve grounding context for a question.

        Raises:
            IndexUnavailable: The index build failed
            ProviderError: The query could not be embedded
        """
        index = await self.gate.ensure_ready()
        return await index.search(question, self.top_k)

    async def answer(
        self,
        history: Sequence[Message],
        question: str,
    ) -> AsyncIterator[str]:
        """
        Stream the answer to ``question``.

        A cached answer is yielded whole. Otherwise tokens are yielded as the
        provider produces them and the full text is cached once the stream
        completes. A failed or abandoned stream caches nothing.

        Args:
            history: Prior turns, oldest first
            question: Latest user message

        Yields:
            str: Answer text chunks in order

        Raises:
            IndexUnavailable: The index build failed
            ProviderError: Embedding or generation failed
        """
        cached = self.cache.get(question)
        if cached is not None:
            logger.info(f"{__name__}:answer - Cache hit (question_len={len(question)})")
            yield cached
            return

        # TODO: share one upstream call between concurrent identical questions
        # (in-flight map keyed by question) to stop cache stampedes.
        results = await self.retrieve(question)
        logger.info(
            f"{__name__}:answer - Retrieved {len(results)} chunks",
            extra={"scores": [round(result.score, 4) for result in results]},
        )

        prompt = build_prompt(
            context_chunks=[result.chunk for result in results],
            history=history,
            question=question,
        )

        tee = StreamTee(self.generator.astream(prompt))
        token_count = 0
        async with aclosing(tee.stream()) as tokens:
            async for token in tokens:
                token_count += 1
                yield token

        self.cache.put(question, tee.text)
        logger.info(
            f"{__name__}:answer - Stream complete: {token_count} tokens, answer_len={len(tee.text)}"
        )
