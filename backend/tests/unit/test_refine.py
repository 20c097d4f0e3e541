# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Refine tests.
Tests single-axis splits, batch splits with row / column / custom
targets and keep policies, manual cropping and the collection
operations behind the result editor.
"""

import numpy as np
import pytest


def _make_piece(w: int = 40, h: int = 20, row: int = 0, col: int = 0, index: int = 0):
    """Piece whose pixel (x, y) stores x in R and y in G."""
    from gridslice.models.piece import Piece

    img = np.zeros((h, w, 4), dtype=np.uint8)
    img[..., 0] = np.arange(w)[None, :]
    img[..., 1] = np.arange(h)[:, None]
    img[..., 3] = 255
    return Piece(pixels=img, original_index=index, row=row, col=col)


def _make_grid(rows: int = 2, cols: int = 3, w: int = 10, h: int = 10):
    return [
        _make_piece(w=w, h=h, row=r, col=c, index=r * cols + c)
        for r in range(rows)
        for c in range(cols)
    ]


def _ids(pieces):
    return [p.piece_id for p in pieces]


# ─── Axis Splitter ───────────────────────────────────────────────────────────

def test_split_horizontal_dimensions():
    from gridslice.models.piece import SplitAxis
    from gridslice.modules.refine import split_piece

    piece = _make_piece(w=40, h=20)
    top, bottom = split_piece(piece, 25, SplitAxis.HORIZONTAL)
    assert (top.width, top.height) == (40, 5)
    assert (bottom.width, bottom.height) == (40, 15)
    assert bottom.pixels[0, 0, 1] == 5


def test_split_vertical_dimensions():
    from gridslice.models.piece import SplitAxis
    from gridslice.modules.refine import split_piece

    piece = _make_piece(w=40, h=20)
    left, right = split_piece(piece, 50, SplitAxis.VERTICAL)
    assert (left.width, left.height) == (20, 20)
    assert (right.width, right.height) == (20, 20)
    assert right.pixels[0, 0, 0] == 20
    assert np.array_equal(np.hstack([left.pixels, right.pixels]), piece.pixels)


@pytest.mark.parametrize("pct", [5, 13.7, 33.3, 50, 97])
def test_split_halves_sum_to_parent(pct):
    from gridslice.models.piece import SplitAxis
    from gridslice.modules.refine import split_piece

    piece = _make_piece(w=37, h=101)
    a, b = split_piece(piece, pct, SplitAxis.HORIZONTAL)
    assert a.height + b.height == piece.height
    assert a.width == b.width == piece.width

    c, d = split_piece(piece, pct, SplitAxis.VERTICAL)
    assert c.width + d.width == piece.width
    assert c.height == d.height == piece.height


def test_split_halves_inherit_identity():
    from gridslice.models.piece import SplitAxis
    from gridslice.modules.refine import split_piece

    piece = _make_piece(row=2, col=1, index=7)
    a, b = split_piece(piece, 40, SplitAxis.VERTICAL)
    for half in (a, b):
        assert (half.original_index, half.row, half.col) == (7, 2, 1)
    assert len({piece.piece_id, a.piece_id, b.piece_id}) == 3


@pytest.mark.parametrize("pct", [0, 100, 150, -10, 0.5])
def test_split_degenerate_passes_through(pct):
    from gridslice.models.piece import SplitAxis
    from gridslice.modules.refine import split_piece

    # 0.5% of 20 px floors to 0 → degenerate too
    piece = _make_piece(w=40, h=20)
    a, b = split_piece(piece, pct, SplitAxis.HORIZONTAL)
    assert a is piece
    assert b is piece


def test_split_degenerate_rejected_when_asked():
    from gridslice.api.middleware.error_handler import DegenerateSplitError
    from gridslice.models.piece import SplitAxis
    from gridslice.modules.refine import split_piece

    with pytest.raises(DegenerateSplitError):
        split_piece(_make_piece(), 100, SplitAxis.VERTICAL, reject_degenerate=True)


def test_split_accepts_axis_string():
    from gridslice.modules.refine import split_piece

    a, b = split_piece(_make_piece(w=40, h=20), 50, "vertical")
    assert a.width == 20


# ─── Batch Operator ──────────────────────────────────────────────────────────

def test_select_targets_row_ordered_by_col():
    from gridslice.models.piece import BatchTarget, TargetKind
    from gridslice.modules.refine import select_targets

    grid = _make_grid(2, 3)
    shuffled = [grid[5], grid[3], grid[0], grid[4], grid[1], grid[2]]
    targets = select_targets(shuffled, BatchTarget(kind=TargetKind.ROW, index=1))
    assert [p.col for p in targets] == [0, 1, 2]
    assert all(p.row == 1 for p in targets)


def test_select_targets_col_ordered_by_row():
    from gridslice.models.piece import BatchTarget, TargetKind
    from gridslice.modules.refine import select_targets

    grid = _make_grid(3, 2)
    reordered = list(reversed(grid))
    targets = select_targets(reordered, BatchTarget(kind=TargetKind.COL, index=0))
    assert [p.row for p in targets] == [0, 1, 2]


def test_select_targets_custom_keeps_collection_order():
    from gridslice.models.piece import BatchTarget, TargetKind
    from gridslice.modules.refine import select_targets

    grid = _make_grid(1, 4)
    target = BatchTarget(
        kind=TargetKind.CUSTOM,
        piece_ids=[grid[3].piece_id, grid[1].piece_id, "gone"],
    )
    assert _ids(select_targets(grid, target)) == [grid[1].piece_id, grid[3].piece_id]


def test_batch_split_both_doubles_targets_in_place():
    from gridslice.models.piece import BatchTarget, KeepPolicy, SplitAxis, TargetKind
    from gridslice.modules.refine import batch_split

    grid = _make_grid(2, 3)
    out = batch_split(
        grid,
        BatchTarget(kind=TargetKind.ROW, index=0),
        50,
        SplitAxis.HORIZONTAL,
        KeepPolicy.BOTH,
        max_workers=3,
    )
    assert len(out) == 9
    # Row 0 pieces became pairs; row 1 passes through untouched
    assert [(p.row, p.col) for p in out[:6]] == [(0, 0), (0, 0), (0, 1), (0, 1), (0, 2), (0, 2)]
    assert all(p.height == 5 for p in out[:6])
    assert _ids(out[6:]) == _ids(grid[3:])


@pytest.mark.parametrize("keep, expected_first_row", [("first", 0), ("second", 5)])
def test_batch_split_keep_single_half(keep, expected_first_row):
    from gridslice.models.piece import BatchTarget, SplitAxis, TargetKind
    from gridslice.modules.refine import batch_split

    grid = _make_grid(2, 2)
    out = batch_split(
        grid, BatchTarget(kind=TargetKind.COL, index=1), 50, SplitAxis.HORIZONTAL, keep
    )
    assert len(out) == 4
    for pos in (1, 3):
        assert out[pos].height == 5
        assert out[pos].pixels[0, 0, 1] == expected_first_row
    assert out[0] is grid[0]
    assert out[2] is grid[2]


def test_batch_split_no_targets_returns_copy():
    from gridslice.models.piece import BatchTarget, SplitAxis, TargetKind
    from gridslice.modules.refine import batch_split

    grid = _make_grid(2, 2)
    out = batch_split(grid, BatchTarget(kind=TargetKind.ROW, index=9), 50, SplitAxis.VERTICAL)
    assert out is not grid
    assert _ids(out) == _ids(grid)


def test_batch_split_custom_with_repeated_row_col():
    from gridslice.models.piece import BatchTarget, SplitAxis, TargetKind
    from gridslice.modules.refine import batch_split, split_piece

    # After one split, two pieces share row/col; custom targets by id only
    piece = _make_piece(w=40, h=40)
    top, bottom = split_piece(piece, 50, SplitAxis.HORIZONTAL)
    out = batch_split(
        [top, bottom],
        BatchTarget(kind=TargetKind.CUSTOM, piece_ids=[bottom.piece_id]),
        50,
        SplitAxis.VERTICAL,
    )
    assert len(out) == 3
    assert out[0] is top
    assert [(p.width, p.height) for p in out[1:]] == [(20, 20), (20, 20)]


def test_batch_split_degenerate_both_duplicates_piece():
    from gridslice.models.piece import BatchTarget, SplitAxis, TargetKind
    from gridslice.modules.refine import batch_split

    grid = _make_grid(1, 2)
    out = batch_split(grid, BatchTarget(kind=TargetKind.ROW, index=0), 0, SplitAxis.VERTICAL)
    assert len(out) == 4
    assert out[0] is grid[0] and out[1] is grid[0]
    assert out[2] is grid[1] and out[3] is grid[1]


def test_batch_split_duplicated_piece_splits_each_occurrence():
    from gridslice.models.piece import BatchTarget, SplitAxis, TargetKind
    from gridslice.modules.refine import batch_split

    grid = _make_grid(1, 1)
    dup = batch_split(grid, BatchTarget(kind=TargetKind.ROW, index=0), 0, SplitAxis.VERTICAL)
    assert dup[0] is dup[1]

    custom = BatchTarget(kind=TargetKind.CUSTOM, piece_ids=[grid[0].piece_id])
    out = batch_split(dup, custom, 50, SplitAxis.HORIZONTAL)
    assert len(out) == 4
    assert len({id(p) for p in out}) == 4
    assert len(set(_ids(out))) == 4
    assert [p.height for p in out] == [5, 5, 5, 5]

    by_row = batch_split(dup, BatchTarget(kind=TargetKind.ROW, index=0), 50, SplitAxis.HORIZONTAL)
    assert len(set(_ids(by_row))) == 4



def test_batch_split_reject_fails_without_partial_result():
    from gridslice.api.middleware.error_handler import DegenerateSplitError
    from gridslice.models.piece import BatchTarget, SplitAxis, TargetKind
    from gridslice.modules.refine import batch_split

    grid = _make_grid(1, 3)
    with pytest.raises(DegenerateSplitError):
        batch_split(
            grid,
            BatchTarget(kind=TargetKind.ROW, index=0),
            100,
            SplitAxis.VERTICAL,
            reject_degenerate=True,
        )


# ─── Manual Cropper ──────────────────────────────────────────────────────────

def test_crop_piece_region_and_identity():
    from gridslice.models.piece import CropRect
    from gridslice.modules.refine import crop_piece

    piece = _make_piece(w=40, h=20, row=1, col=3, index=4)
    out = crop_piece(piece, CropRect(x=5, y=2, w=10, h=8))
    assert (out.width, out.height) == (10, 8)
    assert out.pixels[0, 0, 0] == 5
    assert out.pixels[0, 0, 1] == 2
    assert (out.original_index, out.row, out.col) == (4, 1, 3)
    assert out.piece_id != piece.piece_id


def test_crop_piece_full_extent_is_valid():
    from gridslice.models.piece import CropRect
    from gridslice.modules.refine import crop_piece

    piece = _make_piece(w=40, h=20)
    out = crop_piece(piece, CropRect(x=0, y=0, w=40, h=20))
    assert np.array_equal(out.pixels, piece.pixels)


@pytest.mark.parametrize("rect", [
    dict(x=-1, y=0, w=5, h=5),
    dict(x=0, y=-1, w=5, h=5),
    dict(x=0, y=0, w=0, h=5),
    dict(x=0, y=0, w=5, h=0),
    dict(x=36, y=0, w=5, h=5),
    dict(x=0, y=16, w=5, h=5),
])
def test_crop_piece_invalid_rect(rect):
    from gridslice.api.middleware.error_handler import InvalidCropRectError
    from gridslice.models.piece import CropRect
    from gridslice.modules.refine import crop_piece

    with pytest.raises(InvalidCropRectError):
        crop_piece(_make_piece(w=40, h=20), CropRect(**rect))


# ─── Collection Operations ───────────────────────────────────────────────────

def test_find_piece_index_missing():
    from gridslice.api.middleware.error_handler import PieceNotFoundError
    from gridslice.modules.refine import find_piece_index

    with pytest.raises(PieceNotFoundError):
        find_piece_index(_make_grid(1, 2), "nope")


def test_replace_piece_keeps_position():
    from gridslice.modules.refine import replace_piece

    grid = _make_grid(1, 3)
    new = _make_piece()
    out = replace_piece(grid, grid[1].piece_id, new)
    assert _ids(out) == [grid[0].piece_id, new.piece_id, grid[2].piece_id]
    assert len(grid) == 3


def test_remove_piece():
    from gridslice.modules.refine import remove_piece

    grid = _make_grid(1, 3)
    out = remove_piece(grid, grid[0].piece_id)
    assert _ids(out) == _ids(grid[1:])


@pytest.mark.parametrize("src, dst, expected", [
    (0, 2, [1, 2, 0, 3]),
    (3, 0, [3, 0, 1, 2]),
    (1, 1, [0, 1, 2, 3]),
    (0, 99, [1, 2, 3, 0]),
])
def test_move_piece(src, dst, expected):
    from gridslice.modules.refine import move_piece

    grid = _make_grid(1, 4)
    out = move_piece(grid, grid[src].piece_id, dst)
    assert _ids(out) == [grid[i].piece_id for i in expected]


def test_prune_selection_drops_stale_ids():
    from gridslice.modules.refine import prune_selection

    grid = _make_grid(1, 3)
    selected = {grid[0].piece_id, grid[2].piece_id, "removed-earlier"}
    assert prune_selection(selected, grid) == {grid[0].piece_id, grid[2].piece_id}
