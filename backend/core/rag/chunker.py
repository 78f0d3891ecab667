"""
Overlapping text chunker.

Splits a corpus document into bounded, overlapping chunks. Cut points come
from RecursiveCharacterTextSplitter walking a separator cascade from coarse to
fine (paragraph, line, sentence, word, character). Overlap is applied here
rather than by the splitter so that every chunk after the first starts with a
verifiable suffix of its predecessor.

Dependencies: langchain_text_splitters
System role: First stage of the index build
"""

import logging
import re

from langchain_text_splitters import RecursiveCharacterTextSplitter

from backend.models.chunk import Chunk
from backend.models.document import Document

logger = logging.getLogger(__name__)

SEPARATORS = ["\n\n", "\n", ". ", " ", ""]

_WHITESPACE = re.compile(r"\s")


class Chunker:
    """Split documents into chunks of at most ``chunk_size`` characters."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        """
        Initialize chunker with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters, overlap included
            chunk_overlap: Maximum overlap copied from the end of the previous chunk

        Raises:
            ValueError: When the sizes are out of range
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be >= 0 and smaller than chunk_size ({chunk_size})"
            )

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

        # Pieces leave room for the overlap prefix; separators stay attached
        # and whitespace is kept so pieces concatenate back to the source text.
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size - chunk_overlap,
            chunk_overlap=0,
            separators=SEPARATORS,
            keep_separator="end",
            strip_whitespace=False,
            length_function=len,
        )

    def split(self, document: Document) -> list[Chunk]:
        """
        Split a document into ordered chunks.

        Args:
            document: Document to split

        Returns:
            list[Chunk]: Chunks in document order, empty for empty text
        """
        text = document.text
        if not text:
            return []

        if len(text) <= self.chunk_size:
            pieces = [text]
        else:
            pieces = self._splitter.split_text(text)

        chunks: list[Chunk] = []
        offset = 0
        previous = ""
        for ordinal, piece in enumerate(pieces):
            prefix = self._overlap_from(previous) if ordinal else ""
            chunk_text = prefix + piece
            chunks.append(
                Chunk(
                    id=f"{document.document_id}:{ordinal}",
                    text=chunk_text,
                    ordinal=ordinal,
                    source_document_id=document.document_id,
                    start_index=offset - len(prefix),
                    overlap=len(prefix),
                )
            )
            offset += len(piece)
            previous = chunk_text

        logger.debug(
            "Document split",
            extra={
                "document_id": document.document_id,
                "text_length": len(text),
                "chunk_count": len(chunks),
            },
        )
        return chunks

    def _overlap_from(self, previous: str) -> str:
        """Return the trailing context of ``previous`` that opens the next chunk."""
        if not self.chunk_overlap or not previous:
            return ""
        if len(previous) <= self.chunk_overlap:
            return previous

        tail = previous[-self.chunk_overlap:]
        # Start the overlap on a word boundary when the tail has one.
        match = _WHITESPACE.search(tail)
        if match and match.end() < len(tail):
            return tail[match.end():]
        return tail
