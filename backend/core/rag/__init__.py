"""
Retrieval-and-generation pipeline.

Components, leaf-first:
  chunker: overlapping bounded-size segments
  embedding_index: embedded chunks and cosine top-k search
  ingestion: corpus load and index build
  initialization_gate: build-once lifecycle shared by all requests
  response_cache: full answers keyed by question
  stream_tee: forward-while-accumulating token streams
  generation_pipeline: per-request orchestration
"""

from backend.core.rag.chunker import Chunker
from backend.core.rag.embedding_index import EmbeddingIndex
from backend.core.rag.generation_pipeline import GenerationPipeline
from backend.core.rag.ingestion import CorpusIndexBuilder, load_corpus
from backend.core.rag.initialization_gate import InitializationGate
from backend.core.rag.response_cache import CacheEntry, ResponseCache
from backend.core.rag.stream_tee import StreamTee

__all__ = [
    "CacheEntry",
    "Chunker",
    "CorpusIndexBuilder",
    "EmbeddingIndex",
    "GenerationPipeline",
    "InitializationGate",
    "ResponseCache",
    "StreamTee",
    "load_corpus",
]
