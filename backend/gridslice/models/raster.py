# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Raster Model
The decoded source image. Raster and Piece each keep a private,
write-protected copy of the buffer they are given, so neither the
caller's array nor a view into another image can change them later.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

# RGBA is the only pixel layout the engine works with
CHANNELS = 4


def check_rgba_buffer(pixels: Any) -> np.ndarray:
    """
    Validate an H×W×4 uint8 buffer with positive dimensions and return a
    write-protected copy of it. The input array is left untouched.
    Shared by Raster and Piece.
    """
    if not isinstance(pixels, np.ndarray):
        raise ValueError(f"pixels must be a numpy array, got {type(pixels).__name__}")
    if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
        raise ValueError(f"pixels must have shape (H, W, 4), got {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"pixels must be uint8, got {pixels.dtype}")
    h, w = pixels.shape[:2]
    if h <= 0 or w <= 0:
        raise ValueError(f"pixel buffer must be non-empty, got {w}×{h}")
    owned = np.array(pixels, copy=True)
    owned.flags.writeable = False
    return owned


class Raster(BaseModel):
    """Immutable RGBA pixel buffer for one loaded source image."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    pixels: Any = Field(..., description="np.ndarray RGBA uint8 (H×W×4)")

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
