"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, backend.api, backend.observability, backend.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api import api_router
from backend.api.deps import ServiceContainer
from backend.api.error_handlers import register_exception_handlers
from backend.configs import get_settings
from backend.observability.logger import configure_logging
from backend.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        services: Pre-built service container. When omitted, settings are
            loaded and Gemini-backed services are created at startup; a
            missing GOOGLE_API_KEY aborts startup.

    Returns:
        FastAPI: Configured application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan context manager.

        Creates the shared service container once. The index itself is built
        lazily on the first chat request unless warm-up is enabled.
        """
        container = services
        if container is None:
            settings = get_settings()
            configure_logging(settings.log_level)
            logger.info("Application startup: logging configured")

            container = ServiceContainer.from_settings(settings)
            logger.info(
                "Services initialized",
                extra={
                    "corpus_path": str(settings.rag.corpus_path),
                    "chat_model": settings.providers.chat_model,
                },
            )

        app.state.services = container
        if container.warm_index:
            container.gate.start()
            logger.info("Index warm-up started")

        logger.info("Application startup complete")
        yield

        # Shutdown
        await container.close()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Corpus Chat RAG API",
        description="Answers chat questions using only facts from a fixed text corpus",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register API routes
    app.include_router(api_router, prefix="/api/v1")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:create_app",
        factory=True,
        host="localhost",
        port=8082,
    )
