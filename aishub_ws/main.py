"""Main FastAPI application entry point.

Initializes:
- FastAPI application with CORS middleware
- Redis position store
- Socket.IO delta publisher
- AisHub poller
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aishub_ws import __version__
from aishub_ws.ais import get_poller
from aishub_ws.ais.startup import initialize_poller, shutdown_poller
from aishub_ws.api.routes import router as api_router
from aishub_ws.cache import (
    close_redis_client,
    get_redis_client,
    init_redis_client,
)
from aishub_ws.config import get_settings
from aishub_ws.socketio import init_socketio_server, sio

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info("=" * 60)
    logger.info("Starting AisHub Signal K bridge")
    logger.info("=" * 60)
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Self context: {settings.self_context}")

    # Initialize Redis position store
    logger.info("Initializing Redis position store...")
    try:
        redis_client = await init_redis_client()
        app.state.redis_client = redis_client
        logger.info("Redis position store initialized")
    except Exception as e:
        logger.error(f"Failed to initialize Redis: {e}")
        app.state.redis_client = None

    # Initialize Socket.IO server
    logger.info("Initializing Socket.IO server...")
    try:
        await init_socketio_server()
    except Exception as e:
        logger.error(f"Failed to initialize Socket.IO: {e}")

    # Initialize AisHub poller
    logger.info("Initializing AisHub poller...")
    try:
        app.state.poller = await initialize_poller()
        if app.state.poller is None:
            logger.warning("AisHub poller initialization failed - running without AIS data")
    except Exception as e:
        logger.error(f"Failed to initialize AisHub poller: {e}")
        app.state.poller = None

    logger.info("Startup complete")

    yield

    logger.info("Shutting down AisHub Signal K bridge")

    await shutdown_poller()

    logger.info("Closing Redis connection...")
    await close_redis_client()

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="""
## AisHub Signal K Bridge

Polls the AisHub web service for vessels around the own position and
publishes them as Signal K deltas over Socket.IO.

### API Versioning
All endpoints are prefixed with `/api/v1`.
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    openapi_tags=[
        {
            "name": "AisHub",
            "description": "AisHub poller status, bounding box and manual fetch",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str | bool]:
    """Health check endpoint for container orchestration."""
    poller = get_poller()
    poller_healthy = poller is not None and poller.is_running

    redis_client = get_redis_client()
    redis_healthy = redis_client is not None and await redis_client.health_check()

    return {
        "status": "healthy" if poller_healthy and redis_healthy else "degraded",
        "service": "aishub-ws",
        "environment": settings.environment,
        "poller": poller_healthy,
        "position_store": redis_healthy,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "docs": "/docs" if settings.debug else "disabled",
    }


@app.get("/status")
async def system_status() -> dict:
    """Detailed system status endpoint."""
    poller = get_poller()
    poller_status = poller.get_statistics() if poller else None

    redis_client = get_redis_client()
    redis_status = await redis_client.get_stats() if redis_client else None

    return {
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "poller": poller_status,
        "redis": redis_status,
    }


# Wrap FastAPI app with Socket.IO for WebSocket support
fastapi_app = app
app = socketio.ASGIApp(sio, fastapi_app)
