# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Output File Naming
Deterministic per-piece filenames: slice_{i}_R{row}_C{col}.{ext}

i is the piece's position in the final collection, not its
original_index, so names stay unique after splits (which duplicate
row/col) and after reordering.
"""

from __future__ import annotations

from gridslice.models.piece import Piece


def slice_filename(position: int, piece: Piece, ext: str = "png") -> str:
    return f"slice_{position}_R{piece.row}_C{piece.col}.{ext}"


def archive_entries(pieces: list[Piece], ext: str = "png") -> list[tuple[str, Piece]]:
    """(filename, piece) pairs in collection order."""
    return [(slice_filename(i, p, ext), p) for i, p in enumerate(pieces)]
