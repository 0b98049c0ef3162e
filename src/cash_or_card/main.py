"""Main entry point for the Cash or Card application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from cash_or_card.api.v1 import (
    admin_router,
    cash_discounts_router,
    payment_methods_router,
    ratings_router,
)
from cash_or_card.core.errors import ConsensusError
from cash_or_card.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Crowd-sourced payment acceptance and cash discounts for restaurants",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(payment_methods_router, prefix="/api/v1")
app.include_router(cash_discounts_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(ratings_router, prefix="/api/v1")


@app.exception_handler(ConsensusError)
async def consensus_error_handler(request: Request, exc: ConsensusError) -> JSONResponse:
    """Translate service-layer errors into JSON error responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "description": "Crowd-sourced payment acceptance and cash discounts for restaurants",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cash_or_card.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
