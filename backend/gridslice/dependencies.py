# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — FastAPI Dependencies
Singleton providers for the SessionStore and the image codec.
Both are instantiated once at startup via the lifespan event in main.py
and stored here as module-level singletons. Route handlers access them
via FastAPI's Depends() injection.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from gridslice.config import get_settings
from gridslice.core.codec import DefaultCodec, ImageCodec
from gridslice.core.session_store import InMemorySessionStore, SessionStore
from gridslice.utils.logger import get_logger

log = get_logger(__name__)

# ─── SessionStore Singleton ──────────────────────────────────────────────────

_session_store: SessionStore | None = None


def init_session_store() -> None:
    """
    Initialise the SessionStore singleton.
    Called once during application lifespan startup.
    """
    global _session_store
    settings = get_settings()
    log.info("init_session_store", backend="memory", limit=settings.session_limit)
    _session_store = InMemorySessionStore(limit=settings.session_limit)


def get_session_store() -> SessionStore:
    """
    FastAPI dependency: inject the SessionStore singleton into route handlers.

    Usage in a route:
        @router.get("/sessions/{session_id}")
        def get_session(session_id: str, store: SessionStoreDep):
            session = store.require_session(session_id)
            ...
    """
    if _session_store is None:
        raise RuntimeError(
            "SessionStore has not been initialised. "
            "Ensure init_session_store() is called during app lifespan startup."
        )
    return _session_store


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


# ─── Codec Singleton ─────────────────────────────────────────────────────────

_codec: ImageCodec | None = None


def init_codec() -> None:
    """Initialise the codec singleton from settings."""
    global _codec
    settings = get_settings()
    _codec = DefaultCodec(
        png_compression=settings.png_compression,
        max_dimension=settings.max_dimension_px,
    )
    log.info("init_codec", codec=type(_codec).__name__, extension=_codec.extension)


def get_codec() -> ImageCodec:
    """FastAPI dependency: inject the codec singleton."""
    if _codec is None:
        raise RuntimeError(
            "Codec has not been initialised. "
            "Ensure init_codec() is called during app lifespan startup."
        )
    return _codec


CodecDep = Annotated[ImageCodec, Depends(get_codec)]
