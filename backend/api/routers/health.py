"""
Health check API endpoints.

Routes: GET /health, GET /health/index

Dependencies: backend.core.rag.initialization_gate
System role: Liveness and index readiness probes
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.api.deps import get_initialization_gate
from backend.core.rag.initialization_gate import InitializationGate
from backend.models.index import IndexStatus


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/index", response_model=IndexStatus)
async def health_check_index(
    gate: InitializationGate = Depends(get_initialization_gate),
) -> IndexStatus:
    """Embedding index lifecycle state (never triggers a build)."""
    return gate.status()
