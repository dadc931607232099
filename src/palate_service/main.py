"""Palate Service - FastAPI Application."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .dependencies import ServiceContainer, build_container
from .routers import (
    chat_router,
    knowledge_graph_router,
    rag_router,
    recommendations_router,
)

logger = logging.getLogger("palate_service")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Build the application; ``container`` overrides the settings-driven wiring."""
    settings = container.settings if container else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        # Startup
        logger.info(f"Starting {settings.service_name} v{settings.service_version}")
        app.state.container = container or build_container(settings)

        await app.state.container.knowledge_graph.initialize_schema()
        logger.info(f"Knowledge graph ready ({settings.graph_backend} backend)")

        yield

        # Shutdown
        await app.state.container.close()
        logger.info("Connections closed")

    app = FastAPI(
        title="Palate Service",
        description="Personalization context engine over a food-preference knowledge graph",
        version=settings.service_version,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(knowledge_graph_router, prefix="/api")
    app.include_router(rag_router, prefix="/api")
    app.include_router(chat_router, prefix="/api")
    app.include_router(recommendations_router, prefix="/api")

    @app.get("/")
    async def root() -> dict:
        """Root endpoint."""
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


configure_logging(get_settings().log_level)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "palate_service.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
