# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Editing Session Models
An EditSession owns the piece collection for one loaded image. The
collection is always replaced wholesale; revision counts replacements.
Also holds the request/response schemas of the session API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gridslice.models.grid import GridConfig
from gridslice.models.piece import BatchTarget, KeepPolicy, Piece, SplitAxis
from gridslice.models.raster import Raster


class EditSession(BaseModel):
    """Full session record stored in the SessionStore."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str
    # Retained so the same image can be re-partitioned with a new config
    raster: Optional[Raster] = None
    config: GridConfig
    pieces: list[Piece] = Field(default_factory=list)
    revision: int = 0
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def to_summary(self) -> dict:
        """Serialise to the shape returned by the session endpoints."""
        resp = {
            "session_id": self.session_id,
            "revision": self.revision,
            "config": self.config.model_dump(),
            "piece_count": len(self.pieces),
            "pieces": [p.to_summary() for p in self.pieces],
        }
        if self.raster is not None:
            resp["source"] = {"width": self.raster.width, "height": self.raster.height}
        return resp


# ─── API Request Schemas ─────────────────────────────────────────────────────

class SplitRequest(BaseModel):
    """Body for POST /sessions/{id}/pieces/{piece_id}/split."""
    percentage: float = Field(
        50.0, allow_inf_nan=False, description="Cut position as % of the split dimension"
    )
    axis: SplitAxis = SplitAxis.HORIZONTAL


class BatchSplitRequest(BaseModel):
    """Body for POST /sessions/{id}/batch-split."""
    target: BatchTarget = Field(default_factory=BatchTarget)
    percentage: float = Field(50.0, allow_inf_nan=False)
    axis: SplitAxis = SplitAxis.HORIZONTAL
    keep: KeepPolicy = KeepPolicy.BOTH


class MoveRequest(BaseModel):
    """Body for POST /sessions/{id}/pieces/{piece_id}/move."""
    to_index: int = Field(..., ge=0)
