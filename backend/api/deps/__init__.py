"""API-specific dependencies."""

from .dependencies import (
    ServiceContainer,
    get_generation_pipeline,
    get_initialization_gate,
    get_services,
)

__all__ = [
    "ServiceContainer",
    "get_generation_pipeline",
    "get_initialization_gate",
    "get_services",
]
