# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Grid Models
The user-editable grid description and the per-cell rectangles the
partitioner derives from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional

from pydantic import BaseModel, Field

# Cut position in percent; NaN and ±inf have no pixel position
LinePosition = Annotated[float, Field(allow_inf_nan=False)]


class GridConfig(BaseModel):
    """
    Cut-line layout for one source image.

    rows/cols are advisory: they only seed evenly spaced lines when the
    matching line list is left unset (None). An explicit empty list
    means "no cuts along this axis".
    """
    rows: int = Field(3, ge=1)
    cols: int = Field(3, ge=1)
    # Percentages in (0, 100); order and uniqueness are not required
    horizontal_lines: Optional[list[LinePosition]] = Field(
        None, description="Y cut positions as % of image height"
    )
    vertical_lines: Optional[list[LinePosition]] = Field(
        None, description="X cut positions as % of image width"
    )
    gutter_size: int = Field(0, ge=0, description="Pixels removed at each interior cut")


@dataclass(frozen=True)
class CellRect:
    """Gutter-trimmed pixel rectangle of one grid cell."""
    index: int      # row-major position, counted even for dropped cells
    row: int
    col: int
    x: int
    y: int
    width: int
    height: int

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0
