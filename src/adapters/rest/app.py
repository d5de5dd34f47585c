"""
FastAPI application, REST adapter for the Alivio migraine tracker.

Usage:
    python run_api.py

Or directly:
    uvicorn adapters.rest.app:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Ensure src/ is on sys.path when invoked via uvicorn directly
_src_dir = Path(__file__).resolve().parent.parent.parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from infrastructure.config import Settings
from factory import ServiceFactory
from domain.exceptions import BackupFormatError, RepositoryError
from adapters.rest.dependencies import set_factory
from adapters.rest.routers import analytics, backup, calendar, crises, profile

logger = logging.getLogger(__name__)

__version__ = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize ServiceFactory on startup."""
    project_root = _src_dir.parent
    config = Settings.from_env(project_root=project_root)
    factory = ServiceFactory(config)
    factory.initialize()
    set_factory(factory)
    yield
    # sqlite connections are per-operation


app = FastAPI(
    title="Alivio Migraine Tracker",
    version=__version__,
    description="Episode log, calendar, statistics and backups for migraine tracking.",
    lifespan=lifespan,
)

# CORS: permissive for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BackupFormatError)
async def _backup_format_error(request: Request, exc: BackupFormatError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RepositoryError)
async def _repository_error(request: Request, exc: RepositoryError):
    logger.error("Write failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": f"Changes were not saved: {exc}"},
    )


# Register routers
app.include_router(crises.router)
app.include_router(calendar.router)
app.include_router(analytics.router)
app.include_router(profile.router)
app.include_router(backup.router)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "version": __version__}
