"""
Donations API

FastAPI application for receiving Saweria donation webhooks, validating
signatures, and serving latest-donation and top-donator leaderboards from
in-memory storage.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import donations_router
from .config import Settings, get_settings
from .store import DonationStore, utc_now_iso
from .webhooks import saweria_router

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "OPTIONS"]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _cors_headers(settings: Settings, origin: Optional[str]) -> Dict[str, str]:
    """CORS headers for a plain OPTIONS response; one origin value at most."""
    headers = {
        "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
        "Access-Control-Allow-Headers": ", ".join(["Content-Type", *settings.signature_headers]),
    }
    if "*" in settings.cors_allow_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in settings.cors_allow_origins:
        headers["Access-Control-Allow-Origin"] = origin
    return headers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.

    - Startup: Log configuration
    - Shutdown: Drop in-memory donations
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting {settings.service_name}...")
    logger.info(f"Signature validation: {'enabled' if settings.signature_verification_enabled else 'disabled'}")
    logger.info(f"Recent donations capacity: {settings.recent_donations_capacity}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    app.state.store.clear()
    logger.info("Shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DonationStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (uses env vars by default)
        store: Optional donation store (a new empty one by default)

    Returns:
        Configured FastAPI app
    """
    settings = settings if settings is not None else get_settings()

    app = FastAPI(
        title="Donations API",
        description="""
        Webhook ingestion service for Saweria donations.

        Donations are validated (HMAC signatures), deduplicated, and kept in
        memory for latest-donation and top-donator overlays.
        """,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else DonationStore(capacity=settings.recent_donations_capacity)

    # Add CORS middleware (overlays are loaded from arbitrary origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )

    # Add Prometheus metrics instrumentation
    # Exposes /metrics endpoint for Prometheus scraping
    if settings.metrics_enabled:
        Instrumentator().instrument(app).expose(app)

    app.include_router(saweria_router, prefix="/api")
    app.include_router(donations_router, prefix="/api")

    @app.get("/api/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint for uptime checks."""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "timestamp": utc_now_iso(),
        }

    @app.options("/{full_path:path}")
    async def options_handler(request: Request, full_path: str) -> Response:
        """Answer any OPTIONS request with CORS headers only."""
        return Response(
            status_code=status.HTTP_200_OK,
            headers=_cors_headers(settings, request.headers.get("origin")),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTP errors as {success: false, error}; unknown routes become 404."""
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"success": False, "error": "Endpoint not found"},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc)},
        )

    return app


configure_logging(get_settings().log_level)

app = create_app()
