"""
Chunk domain models.

Represents a bounded, possibly overlapping segment of a document, its
embedding vector, and a scored search hit.

Dependencies: pydantic
System role: Data structures owned by the embedding index
"""

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """Document chunk produced by the chunker."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Deterministic chunk identifier (document id + ordinal)")
    text: str = Field(description="Chunk text content, overlap prefix included")
    ordinal: int = Field(ge=0, description="Position of the chunk within its document")
    source_document_id: str = Field(description="Identifier of the source document")
    start_index: int = Field(ge=0, description="Offset of text within the document")
    overlap: int = Field(
        default=0,
        ge=0,
        description="Length of the leading prefix copied from the previous chunk",
    )


class EmbeddingVector(BaseModel):
    """Embedding produced once per chunk at index build time."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    components: tuple[float, ...]


class SearchResult(BaseModel):
    """Single result from similarity search."""

    model_config = ConfigDict(frozen=True)

    chunk: Chunk
    score: float = Field(description="Cosine similarity between query and chunk (-1.0 to 1.0)")
