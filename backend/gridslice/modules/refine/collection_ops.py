# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Piece Collection Operations
Pure list operations used by the result editor: replace, remove and
reorder pieces, and keep a selection in sync with the collection.
Every function returns a new list or set.
"""

from __future__ import annotations

from typing import Iterable

from gridslice.api.middleware.error_handler import PieceNotFoundError
from gridslice.models.piece import Piece


def find_piece_index(pieces: list[Piece], piece_id: str) -> int:
    """Position of the first piece with piece_id. Raises PieceNotFoundError."""
    for i, p in enumerate(pieces):
        if p.piece_id == piece_id:
            return i
    raise PieceNotFoundError(piece_id)


def replace_piece(pieces: list[Piece], piece_id: str, new_piece: Piece) -> list[Piece]:
    """Swap the piece with piece_id for new_piece at the same position."""
    idx = find_piece_index(pieces, piece_id)
    return [*pieces[:idx], new_piece, *pieces[idx + 1:]]


def remove_piece(pieces: list[Piece], piece_id: str) -> list[Piece]:
    """Drop the piece with piece_id."""
    idx = find_piece_index(pieces, piece_id)
    return [*pieces[:idx], *pieces[idx + 1:]]


def move_piece(pieces: list[Piece], piece_id: str, to_index: int) -> list[Piece]:
    """
    Move a piece so it ends up at to_index in the returned list
    (drag-and-drop semantics). to_index past the end means "last".
    """
    idx = find_piece_index(pieces, piece_id)
    moving = pieces[idx]
    rest = [*pieces[:idx], *pieces[idx + 1:]]
    to_index = max(0, min(to_index, len(rest)))
    return [*rest[:to_index], moving, *rest[to_index:]]


def prune_selection(selected_ids: Iterable[str], pieces: list[Piece]) -> set[str]:
    """Selected ids that still exist in the collection."""
    present = {p.piece_id for p in pieces}
    return {pid for pid in selected_ids if pid in present}
