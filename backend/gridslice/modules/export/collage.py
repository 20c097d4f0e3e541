# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Collage Composer
The inverse of slicing: lays several images out on a fixed-cell grid.

Canvas size for n images, `cols` columns, cell size s and gap g:
    rows   = ceil(n / cols)
    width  = cols * s + (cols - 1) * g
    height = rows * s + (rows - 1) * g

Image i goes to cell (i // cols, i % cols). Fit modes:
    fill    — stretch to the cell, aspect ratio ignored
    cover   — centre-crop to the cell's aspect ratio, then resize
    contain — scale to fit inside the cell and centre it
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from gridslice.utils.image_utils import resize_exact
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


class FitMode(str, Enum):
    CONTAIN = "contain"
    COVER = "cover"
    FILL = "fill"


def _cover(img: np.ndarray, cell: int) -> np.ndarray:
    h, w = img.shape[:2]
    scale = max(cell / w, cell / h)
    # Source window that maps onto the whole cell
    src_w = min(w, max(1, round(cell / scale)))
    src_h = min(h, max(1, round(cell / scale)))
    x0 = (w - src_w) // 2
    y0 = (h - src_h) // 2
    return resize_exact(img[y0:y0 + src_h, x0:x0 + src_w], cell, cell)


def _contain(img: np.ndarray, cell: int) -> tuple[np.ndarray, int, int]:
    h, w = img.shape[:2]
    scale = min(cell / w, cell / h)
    new_w = max(1, min(cell, round(w * scale)))
    new_h = max(1, min(cell, round(h * scale)))
    resized = resize_exact(img, new_w, new_h)
    return resized, (cell - new_w) // 2, (cell - new_h) // 2


def _fit(img: np.ndarray, cell: int, mode: FitMode) -> tuple[np.ndarray, int, int]:
    """Return (patch, dx, dy): the patch and its offset inside the cell."""
    if mode == FitMode.FILL:
        return resize_exact(img, cell, cell), 0, 0
    if mode == FitMode.COVER:
        return _cover(img, cell), 0, 0
    return _contain(img, cell)


def compose_collage(
    images: list[np.ndarray],
    cols: int = 2,
    gap: int = 8,
    fit_mode: FitMode = FitMode.COVER,
    cell_px: int = 400,
    background: tuple[int, int, int, int] = (255, 255, 255, 255),
) -> np.ndarray:
    """
    Compose RGBA images into one RGBA canvas.

    Raises:
        ValueError: if images is empty, or cols / cell_px < 1, or gap < 0.
    """
    if not images:
        raise ValueError("compose_collage needs at least one image.")
    if cols < 1 or cell_px < 1 or gap < 0:
        raise ValueError(f"Invalid collage layout: cols={cols}, cell_px={cell_px}, gap={gap}")

    mode = FitMode(fit_mode)
    rows = math.ceil(len(images) / cols)
    canvas_w = cols * cell_px + (cols - 1) * gap
    canvas_h = rows * cell_px + (rows - 1) * gap

    canvas = np.empty((canvas_h, canvas_w, 4), dtype=np.uint8)
    canvas[:] = background

    for i, img in enumerate(images):
        r, c = divmod(i, cols)
        x = c * (cell_px + gap)
        y = r * (cell_px + gap)
        patch, dx, dy = _fit(img, cell_px, mode)
        ph, pw = patch.shape[:2]
        canvas[y + dy:y + dy + ph, x + dx:x + dx + pw] = patch

    log.info(
        "collage_composed",
        images=len(images),
        grid=f"{rows}x{cols}",
        fit_mode=mode.value,
        size=f"{canvas_w}x{canvas_h}",
    )
    return canvas
