"""
Index lifecycle schemas.

Dependencies: pydantic
System role: Initialization gate state reporting
"""

from enum import Enum

from pydantic import BaseModel, Field


class IndexState(str, Enum):
    """Lifecycle state of the embedding index."""

    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    READY = "ready"
    FAILED = "failed"


class IndexStatus(BaseModel):
    """Snapshot of the initialization gate."""

    state: IndexState
    chunk_count: int = Field(default=0, description="Number of indexed chunks (0 until ready)")
    error: str | None = Field(default=None, description="Build failure message, if any")
