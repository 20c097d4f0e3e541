# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Piece Data Models
A Piece is one extracted sub-image plus the grid coordinates of the
cell it came from. Pieces never reference the source raster or their
siblings, and every operation replaces them rather than editing pixels.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from gridslice.models.raster import check_rgba_buffer


def new_piece_id() -> str:
    return uuid.uuid4().hex


class SplitAxis(str, Enum):
    HORIZONTAL = "horizontal"   # cut along Y → top / bottom
    VERTICAL = "vertical"       # cut along X → left / right


class KeepPolicy(str, Enum):
    BOTH = "both"
    FIRST = "first"
    SECOND = "second"


class TargetKind(str, Enum):
    ROW = "row"
    COL = "col"
    CUSTOM = "custom"


class Piece(BaseModel):
    """
    One output image of the engine.

    Pieces hold numpy buffers, so compare them by identity or piece_id,
    never with ==.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    piece_id: str = Field(default_factory=new_piece_id)
    pixels: Any = Field(..., description="np.ndarray RGBA uint8 (H×W×4), owned")
    original_index: int = Field(..., ge=0, description="Row-major cell index in the source grid")
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)

    @field_validator("pixels")
    @classmethod
    def _lock_pixels(cls, v: Any) -> np.ndarray:
        return check_rgba_buffer(v)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def to_summary(self) -> dict:
        """Serialise metadata only (no pixels) for API responses."""
        return {
            "piece_id": self.piece_id,
            "width": self.width,
            "height": self.height,
            "original_index": self.original_index,
            "row": self.row,
            "col": self.col,
        }


class BatchTarget(BaseModel):
    """Which pieces a batch split applies to."""
    kind: TargetKind = TargetKind.ROW
    # Grid row or column number for kind=row / kind=col
    index: int = Field(0, ge=0)
    # Explicit multi-selection for kind=custom
    piece_ids: list[str] = Field(default_factory=list)


class CropRect(BaseModel):
    """Absolute pixel rectangle inside a piece. Bounds are checked by the cropper."""
    x: int
    y: int
    w: int
    h: int
