# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Grid Partitioner
Converts two boundary sequences into gutter-trimmed pixel rectangles
over a W×H raster and extracts one Piece per surviving cell.

For an interior cut at pixel c and gutter g:
  - the cell ending at the cut stops at    c - floor(g/2)
  - the cell starting after it begins at   c + ceil(g/2)
so exactly g pixels are discarded between neighbours, odd g included.
Cuts at the image edges (0% / 100%) are never trimmed.

Cells whose width or height comes out ≤ 0 (duplicate lines, lines
closer together than the gutter) are dropped without error. Their
row-major index is still consumed, so original_index values of the
output can have gaps. A line outside 0-100 yields a cell that reaches
past the raster; extraction rejects it with OutOfBoundsError and the
whole partition fails.
"""

from __future__ import annotations

from typing import Optional

from gridslice.models.grid import CellRect, GridConfig
from gridslice.models.piece import Piece
from gridslice.models.raster import Raster
from gridslice.modules.partition.line_normalizer import resolve_boundaries
from gridslice.modules.partition.rectangle_extractor import extract_rect
from gridslice.utils.concurrency import ordered_map
from gridslice.utils.geometry_utils import rect_area, segment_span
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


def compute_cell_rects(
    width: int,
    height: int,
    h_bounds: list[float],
    v_bounds: list[float],
    gutter: int = 0,
) -> list[CellRect]:
    """
    Compute the rectangle of every grid cell in row-major order.

    Args:
        width, height: Source raster dimensions in pixels.
        h_bounds:      Normalised horizontal boundaries (length R+1).
        v_bounds:      Normalised vertical boundaries (length C+1).
        gutter:        Pixels removed at each interior boundary.

    Returns:
        R*C CellRects, degenerate ones included (see is_degenerate).
    """
    n_rows = len(h_bounds) - 1
    n_cols = len(v_bounds) - 1

    col_spans = [segment_span(v_bounds, c, width, gutter) for c in range(n_cols)]

    cells: list[CellRect] = []
    index = 0
    for r in range(n_rows):
        y_start, y_end = segment_span(h_bounds, r, height, gutter)
        for c in range(n_cols):
            x_start, x_end = col_spans[c]
            cells.append(CellRect(
                index=index,
                row=r,
                col=c,
                x=x_start,
                y=y_start,
                width=x_end - x_start,
                height=y_end - y_start,
            ))
            index += 1
    return cells


def partition_raster(
    raster: Raster,
    config: GridConfig,
    max_workers: Optional[int] = None,
) -> list[Piece]:
    """
    Slice a raster into Pieces according to a GridConfig.

    Args:
        raster:      Decoded source image.
        config:      Cut lines (seeded from rows/cols where unset) and gutter.
        max_workers: Extraction threads. None → Settings.worker_threads.

    Returns:
        Surviving Pieces in row-major order.

    Raises:
        OutOfBoundsError: if any cell rectangle falls outside the raster.
                          The whole call fails; no partial list is returned.
    """
    h_bounds, v_bounds = resolve_boundaries(config)
    cells = compute_cell_rects(
        raster.width, raster.height, h_bounds, v_bounds, config.gutter_size
    )
    survivors = [cell for cell in cells if not cell.is_degenerate]

    def _extract(cell: CellRect) -> Piece:
        return extract_rect(
            raster,
            cell.x, cell.y, cell.width, cell.height,
            original_index=cell.index,
            row=cell.row,
            col=cell.col,
        )

    pieces = ordered_map(_extract, survivors, max_workers=max_workers)

    covered = sum(rect_area(c.width, c.height) for c in survivors)
    log.info(
        "partition_complete",
        source=f"{raster.width}x{raster.height}",
        grid=f"{len(h_bounds) - 1}x{len(v_bounds) - 1}",
        gutter=config.gutter_size,
        piece_count=len(pieces),
        dropped=len(cells) - len(survivors),
        coverage=round(covered / (raster.width * raster.height), 4),
    )
    return pieces
