# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Rectangle Extractor
Takes a pixel rectangle out of a Raster (or an existing Piece) as a
new owned buffer and wraps it as a Piece with the given grid identity.
"""

from __future__ import annotations

from typing import Union

from gridslice.api.middleware.error_handler import OutOfBoundsError
from gridslice.models.piece import Piece
from gridslice.models.raster import Raster
from gridslice.utils.geometry_utils import rect_within
from gridslice.utils.image_utils import region_view

PixelSource = Union[Raster, Piece]


def extract_rect(
    source: PixelSource,
    x: int, y: int, w: int, h: int,
    *,
    original_index: int,
    row: int,
    col: int,
) -> Piece:
    """
    Extract (x, y, w, h) from source as a new Piece.

    Raises:
        OutOfBoundsError: if w or h is not positive or the rectangle is
                          not fully contained in the source.
    """
    if not rect_within(x, y, w, h, source.width, source.height):
        raise OutOfBoundsError(
            f"Rectangle (x={x}, y={y}, w={w}, h={h}) is not inside the "
            f"{source.width}×{source.height}px source."
        )

    return Piece(
        pixels=region_view(source.pixels, x, y, w, h),
        original_index=original_index,
        row=row,
        col=col,
    )
