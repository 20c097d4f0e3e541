# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Infrastructure tests.
Tests config loading, SessionStore behaviour, the ordered parallel map
and the geometry helpers. Pure numpy, no I/O.
"""

import threading

import numpy as np
import pytest


def _make_piece(row: int = 0, col: int = 0, index: int = 0, w: int = 4, h: int = 4):
    from gridslice.models.piece import Piece
    return Piece(
        pixels=np.zeros((h, w, 4), dtype=np.uint8),
        original_index=index,
        row=row,
        col=col,
    )


# ─── Config ──────────────────────────────────────────────────────────────────

def test_settings_load_defaults():
    from gridslice.config import Settings
    s = Settings(_env_file=None, log_level="INFO")
    assert s.default_rows == 3
    assert s.default_cols == 3
    assert s.max_grid_dim == 20
    assert s.reject_degenerate_splits is False
    assert s.archive_folder == "slices"
    assert s.archive_filename == "slices.zip"
    assert s.collage_cell_px == 400
    assert s.collage_max_cols == 6
    assert s.collage_max_gap == 32


def test_settings_env_override(monkeypatch):
    from gridslice.config import Settings
    monkeypatch.setenv("REJECT_DEGENERATE_SPLITS", "true")
    monkeypatch.setenv("WORKER_THREADS", "2")
    s = Settings(_env_file=None)
    assert s.reject_degenerate_splits is True
    assert s.worker_threads == 2


def test_settings_upload_max_bytes():
    from gridslice.config import Settings
    s = Settings(_env_file=None, upload_max_mb=10)
    assert s.upload_max_bytes == 10 * 1024 * 1024


# ─── Models ──────────────────────────────────────────────────────────────────

def test_piece_pixels_are_locked():
    piece = _make_piece()
    assert piece.pixels.flags.writeable is False
    with pytest.raises(ValueError):
        piece.pixels[0, 0, 0] = 1


def test_raster_leaves_caller_buffer_writable():
    from gridslice.models.raster import Raster
    arr = np.zeros((4, 4, 4), dtype=np.uint8)
    raster = Raster(pixels=arr)

    assert arr.flags.writeable is True
    arr[0, 0, 0] = 200
    assert raster.pixels[0, 0, 0] == 0


def test_piece_from_view_owns_its_pixels():
    from gridslice.models.piece import Piece
    base = np.zeros((6, 6, 4), dtype=np.uint8)
    view = base[1:4, 2:5]
    piece = Piece(pixels=view, original_index=0, row=0, col=0)

    assert not np.shares_memory(piece.pixels, base)
    base[2, 3, 0] = 99
    assert piece.pixels[1, 1, 0] == 0
    assert view.flags.writeable is True


def test_piece_rejects_non_rgba_buffer():
    from pydantic import ValidationError
    from gridslice.models.piece import Piece

    with pytest.raises(ValidationError):
        Piece(pixels=np.zeros((4, 4, 3), dtype=np.uint8), original_index=0, row=0, col=0)
    with pytest.raises(ValidationError):
        Piece(pixels=np.zeros((4, 4, 4), dtype=np.float32), original_index=0, row=0, col=0)
    with pytest.raises(ValidationError):
        Piece(pixels=np.zeros((0, 4, 4), dtype=np.uint8), original_index=0, row=0, col=0)


def test_piece_ids_are_unique():
    a, b = _make_piece(), _make_piece()
    assert a.piece_id != b.piece_id


def test_piece_summary_has_no_pixels():
    summary = _make_piece(row=1, col=2, index=5, w=7, h=3).to_summary()
    assert summary["width"] == 7
    assert summary["height"] == 3
    assert summary["original_index"] == 5
    assert (summary["row"], summary["col"]) == (1, 2)
    assert "pixels" not in summary


def test_request_models_reject_non_finite_positions():
    from pydantic import ValidationError
    from gridslice.models.grid import GridConfig
    from gridslice.models.session import BatchSplitRequest, SplitRequest

    with pytest.raises(ValidationError):
        SplitRequest(percentage=float("nan"))
    with pytest.raises(ValidationError):
        BatchSplitRequest(percentage=float("inf"))
    with pytest.raises(ValidationError):
        GridConfig(horizontal_lines=[25.0, float("inf")])
    with pytest.raises(ValidationError):
        GridConfig(vertical_lines=[float("nan")])



# ─── InMemorySessionStore ────────────────────────────────────────────────────

def test_session_store_create_and_get():
    from gridslice.core.session_store import InMemorySessionStore
    from gridslice.models.grid import GridConfig

    store = InMemorySessionStore()
    pieces = [_make_piece(), _make_piece(col=1, index=1)]
    session = store.create_session(None, GridConfig(), pieces)

    assert session.revision == 0
    fetched = store.get_session(session.session_id)
    assert fetched is not None
    assert [p.piece_id for p in fetched.pieces] == [p.piece_id for p in pieces]


def test_session_store_get_nonexistent():
    from gridslice.api.middleware.error_handler import SessionNotFoundError
    from gridslice.core.session_store import InMemorySessionStore

    store = InMemorySessionStore()
    assert store.get_session("does-not-exist") is None
    with pytest.raises(SessionNotFoundError):
        store.require_session("does-not-exist")


def test_session_store_replace_bumps_revision():
    from gridslice.core.session_store import InMemorySessionStore
    from gridslice.models.grid import GridConfig

    store = InMemorySessionStore()
    session = store.create_session(None, GridConfig(), [_make_piece()])
    replacement = [_make_piece(), _make_piece()]

    updated = store.replace_pieces(session.session_id, replacement, expected_revision=0)
    assert updated.revision == 1
    assert len(updated.pieces) == 2


def test_session_store_stale_revision_conflicts():
    from gridslice.api.middleware.error_handler import SessionConflictError
    from gridslice.core.session_store import InMemorySessionStore
    from gridslice.models.grid import GridConfig

    store = InMemorySessionStore()
    original = [_make_piece()]
    session = store.create_session(None, GridConfig(), original)
    store.replace_pieces(session.session_id, [_make_piece()], expected_revision=0)

    with pytest.raises(SessionConflictError):
        store.replace_pieces(session.session_id, [], expected_revision=0)
    assert len(store.require_session(session.session_id).pieces) == 1


def test_session_store_reset_partition():
    from gridslice.core.session_store import InMemorySessionStore
    from gridslice.models.grid import GridConfig

    store = InMemorySessionStore()
    session = store.create_session(None, GridConfig(), [_make_piece()])
    updated = store.reset_partition(
        session.session_id, GridConfig(rows=1, cols=2), [_make_piece(), _make_piece()]
    )
    assert updated.config.cols == 2
    assert len(updated.pieces) == 2
    assert updated.revision == 1


def test_session_store_delete_and_count():
    from gridslice.core.session_store import InMemorySessionStore
    from gridslice.models.grid import GridConfig

    store = InMemorySessionStore()
    assert store.count() == 0
    a = store.create_session(None, GridConfig(), [])
    store.create_session(None, GridConfig(), [])
    assert store.count() == 2

    assert store.delete_session(a.session_id) is True
    assert store.delete_session(a.session_id) is False
    assert store.count() == 1


def test_session_store_evicts_oldest():
    from gridslice.core.session_store import InMemorySessionStore
    from gridslice.models.grid import GridConfig

    store = InMemorySessionStore(limit=2)
    first = store.create_session(None, GridConfig(), [])
    second = store.create_session(None, GridConfig(), [])
    third = store.create_session(None, GridConfig(), [])

    assert store.count() == 2
    assert store.get_session(first.session_id) is None
    assert store.get_session(second.session_id) is not None
    assert store.get_session(third.session_id) is not None


# ─── Ordered Parallel Map ────────────────────────────────────────────────────

def test_ordered_map_preserves_order():
    from gridslice.utils.concurrency import ordered_map
    assert ordered_map(lambda x: x * 2, range(50), max_workers=4) == [x * 2 for x in range(50)]


def test_ordered_map_inline_when_single_worker():
    from gridslice.utils.concurrency import ordered_map

    seen = []
    ordered_map(lambda x: seen.append(threading.current_thread().name), [1, 2, 3], max_workers=1)
    assert set(seen) == {threading.current_thread().name}


def test_ordered_map_propagates_errors():
    from gridslice.utils.concurrency import ordered_map

    def _boom(x):
        if x == 3:
            raise ValueError("bad item")
        return x

    with pytest.raises(ValueError, match="bad item"):
        ordered_map(_boom, range(6), max_workers=3)


def test_ordered_map_empty():
    from gridslice.utils.concurrency import ordered_map
    assert ordered_map(lambda x: x, [], max_workers=4) == []


# ─── Geometry Utilities ──────────────────────────────────────────────────────

def test_pct_to_px_floors():
    from gridslice.utils.geometry_utils import pct_to_px
    assert pct_to_px(50, 100) == 50
    assert pct_to_px(33.3, 10) == 3
    assert pct_to_px(100, 37) == 37
    assert pct_to_px(0, 37) == 0


def test_pct_to_px_rejects_non_finite():
    from gridslice.utils.geometry_utils import pct_to_px
    for bad in (float("nan"), float("inf"), float("-inf")):
        with pytest.raises(ValueError):
            pct_to_px(bad, 10)


def test_gutter_halves_sum_to_gutter():
    from gridslice.utils.geometry_utils import gutter_after, gutter_before
    for g in range(0, 12):
        assert gutter_before(g) + gutter_after(g) == g
    assert (gutter_before(5), gutter_after(5)) == (2, 3)


def test_segment_span_outer_edges_untrimmed():
    from gridslice.utils.geometry_utils import segment_span
    bounds = [0.0, 50.0, 100.0]
    assert segment_span(bounds, 0, 100, 10) == (0, 45)
    assert segment_span(bounds, 1, 100, 10) == (55, 100)
    # Single segment: no interior cuts, no trimming at all
    assert segment_span([0.0, 100.0], 0, 100, 10) == (0, 100)


def test_rect_within():
    from gridslice.utils.geometry_utils import rect_within
    assert rect_within(0, 0, 10, 10, 10, 10) is True
    assert rect_within(1, 0, 10, 10, 10, 10) is False
    assert rect_within(0, 0, 0, 5, 10, 10) is False
    assert rect_within(-1, 0, 5, 5, 10, 10) is False


def test_rect_area():
    from gridslice.utils.geometry_utils import rect_area
    assert rect_area(5, 6) == 30
    assert rect_area(-2, 6) == 0
