"""
Model provider boundary.

Capability interfaces for embedding and generation plus Google Gemini adapters.
"""

from backend.boundary.providers.protocols import EmbeddingProvider, TextGenerator

__all__ = ["EmbeddingProvider", "TextGenerator"]
