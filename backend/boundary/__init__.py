"""
Boundary layer for external system integrations.

Handles all interactions with external model providers (embeddings, text
generation) behind narrow capability interfaces.
"""
