"""
Corpus document domain model.

Represents one ingested source file. Created once at ingestion and never mutated.

Dependencies: pydantic
System role: Input to the chunker
"""

import hashlib

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Document(BaseModel):
    """Immutable corpus document."""

    model_config = ConfigDict(frozen=True)

    source_path: str = Field(description="Path the text was read from")
    text: str = Field(description="Full document text")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def document_id(self) -> str:
        """Deterministic identifier derived from the source path."""
        return hashlib.sha256(self.source_path.encode("utf-8")).hexdigest()[:16]
