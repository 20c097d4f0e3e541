# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Partition Module
Public API for turning a raster and its cut lines into Pieces.
"""

from gridslice.modules.partition.grid_partitioner import (
    compute_cell_rects,
    partition_raster,
)
from gridslice.modules.partition.line_normalizer import (
    normalize_lines,
    resolve_boundaries,
    seed_even_lines,
)
from gridslice.modules.partition.rectangle_extractor import extract_rect

__all__ = [
    # Line normalizer
    "normalize_lines",
    "seed_even_lines",
    "resolve_boundaries",
    # Grid partitioner
    "compute_cell_rects",
    "partition_raster",
    # Rectangle extractor
    "extract_rect",
]
