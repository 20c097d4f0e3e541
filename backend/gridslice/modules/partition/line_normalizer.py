# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Line Normalizer
Turns the user's cut positions into a boundary sequence
[0, p1, ..., pn, 100] that the partitioner walks pairwise.

Duplicates and out-of-range values are kept as given. Duplicates
become zero-size cells that the partitioner drops.
"""

from __future__ import annotations

from typing import Iterable, Optional

from gridslice.models.grid import GridConfig

EDGE_START = 0.0
EDGE_END = 100.0


def normalize_lines(lines: Iterable[float]) -> list[float]:
    """
    Sort cut positions ascending and bracket them with the image edges.

    Args:
        lines: Cut positions in percent. May be unsorted or repeated.

    Returns:
        [0, *sorted(lines), 100]
    """
    return [EDGE_START, *sorted(float(p) for p in lines), EDGE_END]


def seed_even_lines(count: int) -> list[float]:
    """
    Evenly spaced cut positions that split an axis into `count` bands.
    seed_even_lines(3) → [33.33…, 66.66…]; count ≤ 1 → no lines.
    """
    return [(i + 1) / count * 100 for i in range(count - 1)]


def _resolve(lines: Optional[list[float]], count: int) -> list[float]:
    return list(lines) if lines is not None else seed_even_lines(count)


def resolve_boundaries(config: GridConfig) -> tuple[list[float], list[float]]:
    """
    Boundary sequences (horizontal, vertical) for a GridConfig.
    Unset line lists are seeded from rows / cols.
    """
    h_bounds = normalize_lines(_resolve(config.horizontal_lines, config.rows))
    v_bounds = normalize_lines(_resolve(config.vertical_lines, config.cols))
    return h_bounds, v_bounds
