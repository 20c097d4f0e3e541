# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Refine Module
Public API for re-splitting, re-cropping and reordering existing Pieces.
"""

from gridslice.modules.refine.axis_splitter import split_piece
from gridslice.modules.refine.batch_operator import batch_split, select_targets
from gridslice.modules.refine.collection_ops import (
    find_piece_index,
    move_piece,
    prune_selection,
    remove_piece,
    replace_piece,
)
from gridslice.modules.refine.manual_cropper import crop_piece

__all__ = [
    "split_piece",
    "select_targets",
    "batch_split",
    "crop_piece",
    "find_piece_index",
    "replace_piece",
    "remove_piece",
    "move_piece",
    "prune_selection",
]
