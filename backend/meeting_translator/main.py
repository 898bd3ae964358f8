"""
Real-Time Meeting Translator Backend - Main Application

This is the entry point for the FastAPI application.
It handles:
- REST API endpoints (glossary upload)
- WebSocket connections for the live meeting stream
- Optional Prometheus metrics endpoint
"""
from contextlib import asynccontextmanager
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meeting_translator import __version__
from meeting_translator.api import router as api_router
from meeting_translator.api.websocket import router as ws_router
from meeting_translator.config.settings import settings
from meeting_translator.services.connection import connection_manager
from meeting_translator.services.metrics import start_metrics_server
from meeting_translator.services.session import session_directory

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("openai").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # === STARTUP ===
    logger.info("🚀 Starting Real-Time Meeting Translator Backend...")

    if settings.METRICS_ENABLED:
        start_metrics_server(settings.METRICS_PORT)

    if not settings.OPENAI_API_KEY:
        logger.warning("⚠️ OPENAI_API_KEY is not set, hosting a room will fail")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("🛑 Shutting down...")
    await session_directory.shutdown()


app = FastAPI(
    title="Real-Time Meeting Translator Backend",
    description="Live captioned translation of a hosted audio stream",
    version=__version__,
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include REST API routes
app.include_router(api_router)

# Include WebSocket routes
app.include_router(ws_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Real-Time Meeting Translator",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    active = session_directory.active_session
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "active_room": active.id if active else None,
        "total_connections": connection_manager.get_total_connections(),
        "glossary_version": session_directory.glossary.snapshot().version,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("meeting_translator.main:app", host=settings.API_HOST, port=settings.API_PORT)
