# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — FastAPI Application Entry Point
Creates the app, registers lifespan events, CORS, routers,
and global error handlers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gridslice import __version__
from gridslice.api.middleware.error_handler import register_error_handlers
from gridslice.api.routes import export, pieces, sessions
from gridslice.config import get_settings
from gridslice.dependencies import get_session_store, init_codec, init_session_store
from gridslice.utils.logger import configure_logging, get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Startup: configure logging, initialise the SessionStore and codec.
    Shutdown: log only; sessions are not persisted.
    """
    # ── Startup ──────────────────────────────────────────────────────────────
    configure_logging()
    settings = get_settings()

    log.info(
        "gridslice_startup",
        version=__version__,
        worker_threads=settings.worker_threads,
        session_limit=settings.session_limit,
        reject_degenerate_splits=settings.reject_degenerate_splits,
    )

    init_session_store()
    init_codec()

    log.info("gridslice_ready")
    yield

    # ── Shutdown ─────────────────────────────────────────────────────────────
    log.info("gridslice_shutdown")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="GridSlice",
        summary="Slice an image along a grid, then split, crop and reorder the pieces.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handlers ───────────────────────────────────────────────────────
    register_error_handlers(app)

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(sessions.router)
    app.include_router(pieces.router)
    app.include_router(export.router)

    # ── Health Check ─────────────────────────────────────────────────────────
    @app.get("/health", tags=["health"], summary="Health check")
    async def health() -> dict:
        return {
            "status": "ok",
            "service": "gridslice",
            "version": __version__,
            "sessions": get_session_store().count(),
        }

    return app


# Module-level app instance for uvicorn
app = create_app()
