"""Corpus Chat RAG backend."""
