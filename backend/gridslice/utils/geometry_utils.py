# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Geometry Utilities
Percentage-to-pixel mapping, gutter trimming and rectangle containment
helpers shared by the partitioner, the splitter and the cropper.
"""

import math


# ─── Percent → Pixel ─────────────────────────────────────────────────────────

def pct_to_px(pct: float, dimension: int) -> int:
    """Pixel position of a cut at pct% of dimension (floored)."""
    if not math.isfinite(pct):
        raise ValueError(f"Cut position must be a finite percentage, got {pct}.")
    return math.floor(pct / 100 * dimension)


# ─── Gutter ──────────────────────────────────────────────────────────────────

def gutter_before(gutter: int) -> int:
    """
    Pixels trimmed from the cell that ENDS at an interior cut.
    gutter_before(g) + gutter_after(g) == g for every g ≥ 0.
    """
    return gutter // 2


def gutter_after(gutter: int) -> int:
    """Pixels trimmed from the cell that STARTS at an interior cut."""
    return math.ceil(gutter / 2)


def segment_span(
    bounds: list[float],
    index: int,
    dimension: int,
    gutter: int,
) -> tuple[int, int]:
    """
    Start/end pixel of segment `index` between bounds[index] and
    bounds[index + 1]. The outer edges of the grid are never trimmed.
    """
    last = len(bounds) - 2
    start = 0 if index == 0 else pct_to_px(bounds[index], dimension) + gutter_after(gutter)
    end = dimension if index == last else pct_to_px(bounds[index + 1], dimension) - gutter_before(gutter)
    return start, end


# ─── Rectangles ──────────────────────────────────────────────────────────────

def rect_within(
    x: int, y: int, w: int, h: int,
    width: int, height: int,
) -> bool:
    """True if (x, y, w, h) is non-empty and fully inside a width×height area."""
    return (
        w > 0 and h > 0
        and x >= 0 and y >= 0
        and x + w <= width
        and y + h <= height
    )


def rect_area(w: int, h: int) -> int:
    """Pixel area of a rectangle; degenerate rectangles count as zero."""
    return w * h if w > 0 and h > 0 else 0
