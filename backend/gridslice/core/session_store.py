# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Abstract SessionStore
Clean interface over editing-session state. Sessions hold numpy
buffers and live only as long as the process.

InMemorySessionStore — single-process store with oldest-first eviction
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from gridslice.api.middleware.error_handler import (
    SessionConflictError,
    SessionNotFoundError,
)
from gridslice.models.grid import GridConfig
from gridslice.models.piece import Piece
from gridslice.models.raster import Raster
from gridslice.models.session import EditSession
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


# ─── Abstract Interface ──────────────────────────────────────────────────────

class SessionStore(ABC):
    """
    Abstract base class for session backends.
    All methods are synchronous; engine work happens outside the store.
    """

    @abstractmethod
    def create_session(
        self,
        raster: Optional[Raster],
        config: GridConfig,
        pieces: list[Piece],
    ) -> EditSession:
        """Store a freshly partitioned session. Returns the EditSession."""

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[EditSession]:
        """Return EditSession by ID, or None if not found."""

    @abstractmethod
    def replace_pieces(
        self,
        session_id: str,
        pieces: list[Piece],
        expected_revision: Optional[int] = None,
    ) -> EditSession:
        """
        Swap in a new piece collection wholesale and bump the revision.
        If expected_revision is given and the session has moved on since,
        raises SessionConflictError and leaves the session untouched.
        """

    @abstractmethod
    def reset_partition(
        self,
        session_id: str,
        config: GridConfig,
        pieces: list[Piece],
    ) -> EditSession:
        """Replace both the grid config and the collection after re-partitioning."""

    @abstractmethod
    def delete_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of live sessions."""

    def require_session(self, session_id: str) -> EditSession:
        """Like get_session, but raises SessionNotFoundError."""
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session


# ─── In-Memory Implementation ────────────────────────────────────────────────

class InMemorySessionStore(SessionStore):
    """
    Thread-safe in-memory session store using a dict + RLock.
    Beyond `limit` sessions the least recently created one is evicted.
    All data is lost on process restart.
    """

    def __init__(self, limit: int = 32) -> None:
        self._store: dict[str, EditSession] = {}
        self._lock = threading.RLock()
        self._limit = max(1, limit)

    def create_session(
        self,
        raster: Optional[Raster],
        config: GridConfig,
        pieces: list[Piece],
    ) -> EditSession:
        session = EditSession(
            session_id=str(uuid.uuid4()),
            raster=raster,
            config=config,
            pieces=list(pieces),
        )
        with self._lock:
            self._store[session.session_id] = session
            self._evict_locked()
        log.info(
            "session_created",
            session_id=session.session_id,
            piece_count=len(pieces),
        )
        return session

    def get_session(self, session_id: str) -> Optional[EditSession]:
        with self._lock:
            return self._store.get(session_id)

    def replace_pieces(
        self,
        session_id: str,
        pieces: list[Piece],
        expected_revision: Optional[int] = None,
    ) -> EditSession:
        with self._lock:
            session = self.require_session(session_id)
            if expected_revision is not None and session.revision != expected_revision:
                raise SessionConflictError(
                    f"Session {session_id} is at revision {session.revision}, "
                    f"expected {expected_revision}."
                )
            session.pieces = list(pieces)
            self._touch(session)
        log.debug(
            "session_pieces_replaced",
            session_id=session_id,
            revision=session.revision,
            piece_count=len(pieces),
        )
        return session

    def reset_partition(
        self,
        session_id: str,
        config: GridConfig,
        pieces: list[Piece],
    ) -> EditSession:
        with self._lock:
            session = self.require_session(session_id)
            session.config = config
            session.pieces = list(pieces)
            self._touch(session)
        log.info(
            "session_repartitioned",
            session_id=session_id,
            revision=session.revision,
            piece_count=len(pieces),
        )
        return session

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            removed = self._store.pop(session_id, None) is not None
        if removed:
            log.info("session_deleted", session_id=session_id)
        return removed

    def count(self) -> int:
        """Return total number of sessions in store (useful for health checks)."""
        with self._lock:
            return len(self._store)

    @staticmethod
    def _touch(session: EditSession) -> None:
        session.revision += 1
        session.updated_at = datetime.now(timezone.utc)

    def _evict_locked(self) -> None:
        while len(self._store) > self._limit:
            # dicts keep insertion order, so the first key is the oldest session
            oldest_id = next(iter(self._store))
            del self._store[oldest_id]
            log.info("session_evicted", session_id=oldest_id)
