"""
FastAPI application for the reading recommendation service.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..logging_config import setup_logging
from ..version import API_VERSION
from .middleware import (
    setup_error_handling_middleware,
    setup_logging_middleware,
    setup_metrics_middleware,
)
from .routes import analysis, health, recommendations, version

# Setup logging on module import
setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    """
    logger.info(
        "api_starting",
        version=API_VERSION,
        log_level=settings.log_level,
        llm=f"{settings.llm_provider}/{settings.llm_model}",
        search_provider=settings.search_provider,
        ai_relevance_blend=settings.enable_ai_relevance_blend,
    )
    yield
    logger.info("api_shutting_down")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Reading Recommender",
        description="Keyword extraction, web search and relevance ranking of related books, articles and videos",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Order matters: first added = innermost
    if settings.enable_metrics:
        setup_metrics_middleware(app)
    setup_logging_middleware(app)
    setup_error_handling_middleware(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(version.router, prefix="/api/v1", tags=["Version"])
    app.include_router(recommendations.router, prefix="/api/v1", tags=["Recommendations"])
    app.include_router(analysis.router, prefix="/api/v1", tags=["Analysis"])

    return app


app = create_app()


def main() -> None:
    """
    Entry point for running the API server directly.

    For development use. In production, run uvicorn directly.
    """
    import uvicorn

    uvicorn.run(
        "reading_recommender.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
