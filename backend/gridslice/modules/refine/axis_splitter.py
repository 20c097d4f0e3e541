# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Axis Splitter
Cuts one Piece into two along an axis at a percentage of its size.

  horizontal → cut along Y, result is (top, bottom)
  vertical   → cut along X, result is (left, right)

Both halves keep the parent's original_index / row / col.

A cut that lands at or beyond an edge (cut ≤ 0 or cut ≥ dim) is a
no-op: the parent is returned twice, same object. With
reject_degenerate=True a DegenerateSplitError is raised instead.
"""

from __future__ import annotations

from gridslice.api.middleware.error_handler import DegenerateSplitError
from gridslice.models.piece import Piece, SplitAxis
from gridslice.modules.partition.rectangle_extractor import extract_rect
from gridslice.utils.geometry_utils import pct_to_px
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


def split_piece(
    piece: Piece,
    percentage: float,
    axis: SplitAxis,
    *,
    reject_degenerate: bool = False,
) -> tuple[Piece, Piece]:
    """
    Split a Piece in two.

    Args:
        piece:             Piece to split.
        percentage:        Cut position as % of the split dimension.
        axis:              SplitAxis.HORIZONTAL or SplitAxis.VERTICAL.
        reject_degenerate: Raise instead of passing the piece through
                           when the cut does not fall strictly inside.

    Returns:
        (first, second) — top/bottom or left/right.
    """
    axis = SplitAxis(axis)
    dim = piece.height if axis == SplitAxis.HORIZONTAL else piece.width
    cut = pct_to_px(percentage, dim)

    if cut <= 0 or cut >= dim:
        if reject_degenerate:
            raise DegenerateSplitError(
                f"A {axis.value} cut at {percentage}% lands at pixel {cut}, "
                f"outside the open range (0, {dim}) of piece {piece.piece_id}."
            )
        log.warning(
            "split_degenerate",
            piece_id=piece.piece_id,
            axis=axis.value,
            percentage=percentage,
            cut=cut,
            dim=dim,
        )
        return piece, piece

    identity = dict(
        original_index=piece.original_index,
        row=piece.row,
        col=piece.col,
    )
    if axis == SplitAxis.HORIZONTAL:
        first = extract_rect(piece, 0, 0, piece.width, cut, **identity)
        second = extract_rect(piece, 0, cut, piece.width, dim - cut, **identity)
    else:
        first = extract_rect(piece, 0, 0, cut, piece.height, **identity)
        second = extract_rect(piece, cut, 0, dim - cut, piece.height, **identity)

    log.debug(
        "piece_split",
        piece_id=piece.piece_id,
        axis=axis.value,
        cut=cut,
        first=f"{first.width}x{first.height}",
        second=f"{second.width}x{second.height}",
    )
    return first, second
