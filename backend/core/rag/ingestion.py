"""
Corpus ingestion and index build.

Reads the corpus file, chunks it and embeds the chunks. CorpusIndexBuilder is
the build callable handed to the InitializationGate.

Dependencies: fastapi.concurrency, backend.core.rag
System role: Index build orchestration
"""

import logging
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from backend.boundary.providers.protocols import EmbeddingProvider
from backend.core.exceptions import IngestionError
from backend.core.rag.chunker import Chunker
from backend.core.rag.embedding_index import EmbeddingIndex
from backend.models.document import Document

logger = logging.getLogger(__name__)


async def load_corpus(path: str | Path) -> Document:
    """
    Read the corpus file into a Document.

    Args:
        path: Plain-text (UTF-8) corpus file

    Returns:
        Document: Immutable document holding the file contents

    Raises:
        IngestionError: When the file is missing, unreadable or not UTF-8
    """
    corpus_path = Path(path)
    try:
        text = await run_in_threadpool(corpus_path.read_text, encoding="utf-8")
    except FileNotFoundError as e:
        raise IngestionError(f"Corpus file not found: {corpus_path}", source_path=str(corpus_path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(
            f"Corpus file unreadable: {corpus_path} ({type(e).__name__}: {e})",
            source_path=str(corpus_path),
        ) from e

    logger.info(f"{__name__}:load_corpus - Loaded {corpus_path} ({len(text)} chars)")
    return Document(source_path=str(corpus_path), text=text)


class CorpusIndexBuilder:
    """Build an EmbeddingIndex from the corpus file: load, chunk, embed."""

    def __init__(
        self,
        corpus_path: str | Path,
        chunker: Chunker,
        embeddings: EmbeddingProvider,
        batch_size: int = 100,
    ) -> None:
        """
        Initialize builder.

        Args:
            corpus_path: Corpus file location
            chunker: Chunker applied to the corpus document
            embeddings: Embedding provider used for chunks and queries
            batch_size: Chunks per embedding call
        """
        self.corpus_path = Path(corpus_path)
        self.chunker = chunker
        self.embeddings = embeddings
        self.batch_size = batch_size

    async def __call__(self) -> EmbeddingIndex:
        """
        Run the full build.

        Returns:
            EmbeddingIndex: Ready, immutable index

        Raises:
            IngestionError: Corpus could not be read
            ProviderError: Embedding provider failed
        """
        document = await load_corpus(self.corpus_path)
        chunks = self.chunker.split(document)
        logger.info(f"{__name__}:build - Chunked corpus into {len(chunks)} chunks")
        return await EmbeddingIndex.build(chunks, self.embeddings, batch_size=self.batch_size)
