"""
Loadplan - Main Application Entry Point

FastAPI application that compiles worker concurrency profiles into the
configuration a load runtime executes.
"""

from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from loadplan.config import settings

# Configure logging
# **IMPORTANT**: Use uvicorn's colored "LEVEL:" format for ALL loggers.
from uvicorn.logging import DefaultFormatter

console_handler = logging.StreamHandler()
console_handler.setFormatter(DefaultFormatter(fmt=settings.LOG_FORMAT, use_colors=True))

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    handlers=[console_handler],
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "loadplan"
SERVICE_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - handles startup and shutdown events.
    """
    logger.info("🚀 Loadplan starting up...")
    logger.info(
        "📐 Profile limits: %d operations, %d workers",
        settings.MAX_PROFILE_STAGES,
        settings.MAX_WORKERS,
    )
    yield
    logger.info("🛑 Loadplan shutting down...")


app = FastAPI(
    title="Loadplan",
    description="Compiles worker concurrency profiles into load runtime configuration",
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Configure CORS for local development
if settings.APP_DEBUG:
    app.add_middleware(
        cast(Any, CORSMiddleware),
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"🔓 CORS enabled for origins: {settings.CORS_ORIGINS}")


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        dict: Service health status and version information
    """
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": "development" if settings.APP_DEBUG else "production",
    }


from loadplan.api.routes import profiles  # noqa: E402

app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])


if __name__ == "__main__":
    import uvicorn

    # **IMPORTANT**: log_config=None prevents uvicorn from overriding our logging setup.
    uvicorn.run(
        "loadplan.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.APP_RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )
