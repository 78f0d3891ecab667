"""
Core business logic module.

Contains the exception hierarchy and the retrieval-and-generation pipeline.
All business rules and domain-specific logic reside here.
"""

from backend.core.exceptions import (
    CorpusChatException,
    IndexUnavailable,
    IngestionError,
    ProviderError,
    ValidationError,
)

__all__ = [
    "CorpusChatException",
    "IndexUnavailable",
    "IngestionError",
    "ProviderError",
    "ValidationError",
]
