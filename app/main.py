"""FastAPI application entry point."""

import logging
from datetime import datetime, timezone
from urllib.parse import urlparse

from fastapi import FastAPI

from app.routers import search as search_router
from app.config import settings
from app.models.schemas import HealthResponse
from app.utils.cors import ALLOWED_HEADERS, ALLOWED_METHODS, PreflightCORSMiddleware

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

VERSION = "1.0.0"

app = FastAPI(
    title="IDD Search Gateway",
    description="Batch due-diligence search: parallel upstream queries with per-query results",
    version=VERSION
)

app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=ALLOWED_METHODS,
    allow_headers=ALLOWED_HEADERS,
)

# Mount search router
app.include_router(search_router.router, prefix="/api/search", tags=["Search"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "IDD Search Gateway",
        "version": VERSION,
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        upstream=urlparse(settings.SEARCH_API_URL).netloc,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
