# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Manual Cropper
Re-crops one Piece to an arbitrary rectangle in its own pixel space.
"""

from __future__ import annotations

from gridslice.api.middleware.error_handler import InvalidCropRectError
from gridslice.models.piece import CropRect, Piece
from gridslice.modules.partition.rectangle_extractor import extract_rect
from gridslice.utils.geometry_utils import rect_within
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


def crop_piece(piece: Piece, rect: CropRect) -> Piece:
    """
    Crop a Piece to rect, keeping its grid identity.

    Raises:
        InvalidCropRectError: unless x ≥ 0, y ≥ 0, w ≥ 1, h ≥ 1,
                              x + w ≤ width and y + h ≤ height.
    """
    if not rect_within(rect.x, rect.y, rect.w, rect.h, piece.width, piece.height):
        raise InvalidCropRectError(
            f"Crop (x={rect.x}, y={rect.y}, w={rect.w}, h={rect.h}) does not fit "
            f"inside piece {piece.piece_id} ({piece.width}×{piece.height}px)."
        )

    cropped = extract_rect(
        piece,
        rect.x, rect.y, rect.w, rect.h,
        original_index=piece.original_index,
        row=piece.row,
        col=piece.col,
    )
    log.debug(
        "piece_cropped",
        piece_id=piece.piece_id,
        new_piece_id=cropped.piece_id,
        rect=(rect.x, rect.y, rect.w, rect.h),
    )
    return cropped
