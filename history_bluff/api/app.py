"""FastAPI application for the History Bluff game."""

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..infrastructure.dependencies import get_service_container
from .endpoints import cache, events, games, health

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Warm up the fact source on startup and close it on shutdown."""
    container = get_service_container()
    logging.getLogger().setLevel(container.config.log_level)
    try:
        await container.get_game_service()
    except Exception as e:
        # Retried lazily on the first request that needs it
        logger.warning(f"⚠️ Failed to initialize fact source: {e}")

    yield  # Application runs here

    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="History Bluff API",
    description="Turn-based history bluffing game with Wikipedia-backed event lookup",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware for a local browser UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(events.router)
app.include_router(games.router)
app.include_router(cache.router)
