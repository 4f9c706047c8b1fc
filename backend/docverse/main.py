"""
DocVerse Backend - Main Application
"""

import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docverse.api.responses import ENGINE_HEADER
from docverse.api.routes import convert, health, tools
from docverse.config import settings
from docverse.logging_config import setup_logging
from docverse.models.schemas import ErrorResponse
from docverse.services.exceptions import DocVerseError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging(settings)
    logger.info("Starting %s %s (%s)", settings.app_name, settings.app_version, settings.app_env)
    if settings.cloud_engine_enabled:
        logger.info("Cloud engine preferred; local engines used as fallback")
    elif settings.prefer_cloud_engine:
        logger.warning("Cloud engine preferred but credentials are missing; using local engines")

    yield

    logger.info("Shutting down")


app = FastAPI(
    title="DocVerse API",
    description="PDF and Office conversion, compression, OCR and merge",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", ENGINE_HEADER],
)


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid or unsupported input"},
    413: {"model": ErrorResponse, "description": "Upload too large"},
    500: {"model": ErrorResponse, "description": "Processing failed"},
}

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(convert.router, tags=["Convert"], responses=ERROR_RESPONSES)
app.include_router(tools.router, tags=["Tools"], responses=ERROR_RESPONSES)


@app.exception_handler(DocVerseError)
async def docverse_exception_handler(request: Request, exc: DocVerseError):
    """Map domain errors to their status; internals stay in the logs."""
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.http_status,
        content=ErrorResponse(
            error=HTTPStatus(exc.http_status).phrase,
            detail=exc.public_message,
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if settings.app_debug else "An unexpected error occurred",
        ).model_dump(),
    )


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }
