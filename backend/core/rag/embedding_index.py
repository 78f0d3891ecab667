"""
In-memory embedding index with cosine similarity search.

Holds the ordered (Chunk, EmbeddingVector) pairs of the corpus plus an
L2-normalised matrix used for scoring. The build is all-or-nothing: the index
object only exists once every batch has been embedded. After that nothing
mutates it, so concurrent requests share it without locking.

Dependencies: numpy, backend.boundary.providers
System role: Vector storage and top-k retrieval
"""

import logging
from collections.abc import Sequence

import numpy as np

from backend.boundary.providers.protocols import EmbeddingProvider
from backend.core.exceptions import ProviderError, upstream_status_code
from backend.models.chunk import Chunk, EmbeddingVector, SearchResult

logger = logging.getLogger(__name__)


def _l2_normalize(mat: np.ndarray) -> np.ndarray:
    """Row-normalise; zero rows stay zero so they score 0 against any query."""
    norms = np.linalg.norm(mat, axis=-1, keepdims=True)
    return np.divide(mat, norms, out=np.zeros_like(mat), where=norms > 0)


class EmbeddingIndex:
    """Immutable, ordered collection of embedded chunks."""

    def __init__(
        self,
        entries: Sequence[tuple[Chunk, EmbeddingVector]],
        embeddings: EmbeddingProvider,
    ) -> None:
        """
        Initialize index from already-embedded entries.

        Prefer EmbeddingIndex.build(); this constructor does no provider calls.

        Args:
            entries: (chunk, vector) pairs in build order
            embeddings: Provider used to embed search queries
        """
        self._entries = tuple(entries)
        self._embeddings = embeddings

        if self._entries:
            matrix = np.array([vector.components for _, vector in self._entries], dtype=np.float64)
        else:
            matrix = np.zeros((0, 0), dtype=np.float64)
        self._matrix = _l2_normalize(matrix)
        self._matrix.setflags(write=False)

    @classmethod
    async def build(
        cls,
        chunks: Sequence[Chunk],
        embeddings: EmbeddingProvider,
        batch_size: int = 100,
    ) -> "EmbeddingIndex":
        """
        Embed chunks in batches and build the index.

        Args:
            chunks: Chunks in document order
            embeddings: Embedding provider
            batch_size: Chunks per provider call

        Returns:
            EmbeddingIndex: Index holding every chunk

        Raises:
            ProviderError: Provider unreachable, rejected input or returned a malformed response
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        vectors: list[list[float]] = []
        for start in range(0, len(chunks), batch_size):
            batch = chunks[start:start + batch_size]
            try:
                batch_vectors = await embeddings.aembed_documents([chunk.text for chunk in batch])
            except ProviderError:
                raise
            except Exception as e:
                logger.error(
                    f"{__name__}:build - Embedding batch failed at chunk {start}: {type(e).__name__}: {e}"
                )
                raise ProviderError(
                    f"Embedding provider failed: {e}",
                    operation="embed_documents",
                    details={"batch_start": start, "batch_size": len(batch)},
                    status_code=upstream_status_code(e),
                ) from e

            if len(batch_vectors) != len(batch):
                raise ProviderError(
                    "Embedding provider returned the wrong number of vectors",
                    operation="embed_documents",
                    details={"expected": len(batch), "received": len(batch_vectors)},
                )
            vectors.extend(batch_vectors)

        dimensions = {len(vector) for vector in vectors}
        if len(dimensions) > 1 or 0 in dimensions:
            raise ProviderError(
                "Embedding provider returned inconsistent vector dimensions",
                operation="embed_documents",
                details={"dimensions": sorted(dimensions)},
            )

        entries = [
            (chunk, EmbeddingVector(chunk_id=chunk.id, components=tuple(float(x) for x in vector)))
            for chunk, vector in zip(chunks, vectors)
        ]
        logger.info(
            f"{__name__}:build - Indexed {len(entries)} chunks (dimension={next(iter(dimensions), 0)})"
        )
        return cls(entries, embeddings)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        """Indexed chunks in build order."""
        return tuple(chunk for chunk, _ in self._entries)

    @property
    def entries(self) -> tuple[tuple[Chunk, EmbeddingVector], ...]:
        """Indexed (chunk, vector) pairs in build order."""
        return self._entries

    @property
    def dimension(self) -> int:
        """Vector dimension, 0 for an empty index."""
        return int(self._matrix.shape[1]) if self._entries else 0

    async def search(self, query: str, k: int = 3) -> list[SearchResult]:
        """
        Return the k chunks most similar to the query.

        Args:
            query: Search query text
            k: Maximum number of results

        Returns:
            list[SearchResult]: min(k, len(self)) results, highest cosine
            similarity first; ties go to the lower ordinal

        Raises:
            ValueError: When k < 1
            ProviderError: When the query cannot be embedded
        """
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        if not self._entries:
            return []

        try:
            query_vector = await self._embeddings.aembed_query(query)
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"{__name__}:search - Query embedding failed: {type(e).__name__}: {e}")
            raise ProviderError(
                f"Embedding provider failed: {e}",
                operation="embed_query",
                status_code=upstream_status_code(e),
            ) from e

        query_array = np.asarray(query_vector, dtype=np.float64)
        if query_array.shape != (self.dimension,):
            raise ProviderError(
                "Query embedding dimension does not match the index",
                operation="embed_query",
                details={"expected": self.dimension, "received": int(query_array.size)},
            )

        scores = self._matrix @ _l2_normalize(query_array)
        ranked = sorted(
            range(len(self._entries)),
            key=lambda i: (-scores[i], self._entries[i][0].ordinal, i),
        )
        return [
            SearchResult(chunk=self._entries[i][0], score=float(scores[i]))
            for i in ranked[:k]
        ]
