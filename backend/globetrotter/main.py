"""
FastAPI entrypoint for the GlobeTrotter backend application.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from globetrotter.core.config import settings
from globetrotter.core.exceptions import (
    GlobeTrotterError, NotFound, ScopeMismatch, InvalidRange, Unauthorized, Conflict
)
from globetrotter.core.utils import format_error
from globetrotter.api.router import api_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    NotFound: 404,
    ScopeMismatch: 404,  # A child addressed through the wrong parent is "not found" from outside
    InvalidRange: 400,
    Unauthorized: 403,
    Conflict: 409,
}

app = FastAPI(
    title="GlobeTrotter API",
    description="Backend API for multi-city trip planning",
    version="1.0.0",
    debug=settings.DEBUG
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GlobeTrotterError)
async def domain_error_handler(request: Request, exc: GlobeTrotterError):
    """Translate service failures into HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=format_error(exc.message, details=type(exc).__name__)
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "GlobeTrotter API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
