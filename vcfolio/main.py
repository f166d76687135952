"""
VCFolio Backend — FastAPI Application Entry Point

This is the main entry point for the VCFolio API server.
It configures the FastAPI application, includes all routers, sets up CORS,
logging and error handlers, and initializes the database on startup.

Architecture:
    - FastAPI application with auto-generated OpenAPI docs at /docs
    - All routers mounted under /api prefix
    - Database tables and the upload directory created on startup via lifespan event
    - Domain errors rendered as JSON by handlers from exceptions.py

Usage:
    python -m uvicorn vcfolio.main:app --host 127.0.0.1 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .database import init_db
from .exceptions import (
    VCFolioException,
    vcfolio_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)
from .routers import auth, projects, documents, files, stats, export
from .storage import upload_dir

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("vcfolio")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    - On startup: create tables if they don't exist and ensure the upload dir
    - On shutdown: nothing special needed
    """
    init_db()
    logger.info("Upload directory: %s", upload_dir())
    yield


# Create FastAPI application
app = FastAPI(
    title="VCFolio Portfolio Tracker",
    description=(
        "REST API for tracking venture investments and their documents. "
        "Supports project CRUD, document upload and serving, and "
        "portfolio-level book value / MOIC summaries."
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(VCFolioException, vcfolio_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Mount all routers
app.include_router(auth.router)       # /api/auth
app.include_router(projects.router)   # /api/projects
app.include_router(documents.router)  # /api/documents
app.include_router(files.router)      # /api/files
app.include_router(stats.router)      # /api/stats
app.include_router(export.router)     # /api/export


@app.get("/")
def root():
    """API information endpoint."""
    return {
        "name": "VCFolio API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "auth": "/api/auth/login",
            "projects": "/api/projects",
            "documents": "/api/documents",
            "upload": "/api/documents/upload",
            "files": "/api/files/{path}",
            "summary": "/api/stats/summary",
            "export": "/api/export/projects",
        },
    }


@app.get("/health")
def health_check():
    """Simple health check for monitoring."""
    return {"status": "healthy"}
