"""
AutoApply API - Main Application Entry Point

This module initializes the FastAPI application with:
- Database schema initialization
- CORS middleware for frontend communication
- Error taxonomy -> HTTP status mapping
- Prometheus metrics
- API router registration

Architecture:
    FastAPI App
    ├── Lifespan Management (startup/shutdown)
    ├── CORS Middleware (frontend origin)
    ├── Prometheus Middleware + /metrics
    └── API Router
        ├── /auth - Sign-up, sign-in, session
        ├── /applications - Job application board (CRUD + status moves)
        ├── /profile - Candidate profile
        ├── /analyzer - Fit score and keyword analysis
        ├── /documents - Generated resume / cover letter cache
        ├── /billing - Premium entitlement and checkout
        └── /stats - Dashboard statistics
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from autoapply.config import get_settings
from autoapply.database import init_db
from autoapply.errors import register_handlers
from autoapply.api import api_router
from autoapply.middleware import setup_metrics
from autoapply.services.documents import get_document_cache

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create missing tables.
    Shutdown: close the document cache connection.
    """
    await init_db()
    yield
    cache = await get_document_cache()
    await cache.close()


app = FastAPI(
    title="AutoApply API",
    description="Job application tracking, resume fit scoring and profile management",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_handlers(app)
setup_metrics(app)
app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
