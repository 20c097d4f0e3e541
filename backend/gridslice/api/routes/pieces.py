# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — /sessions/{session_id}/pieces/...
Per-piece edits (split, crop, delete, move), batch split, and raw
piece image download. Every edit computes a new collection from the
one read at the start of the request and swaps it in wholesale; if
another edit landed in between, the request fails with 409.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Response
from structlog.contextvars import bound_contextvars

from gridslice.config import get_settings
from gridslice.dependencies import CodecDep, SessionStoreDep
from gridslice.models.piece import BatchTarget, CropRect, KeepPolicy, TargetKind
from gridslice.models.session import BatchSplitRequest, MoveRequest, SplitRequest
from gridslice.modules.refine import (
    batch_split,
    crop_piece,
    find_piece_index,
    move_piece,
    prune_selection,
    remove_piece,
    replace_piece,
)
from gridslice.utils.logger import get_logger

router = APIRouter(tags=["pieces"])
log = get_logger(__name__)


@router.get(
    "/sessions/{session_id}/pieces/{piece_id}",
    summary="Download one piece as an image",
)
async def get_piece_image(
    session_id: str,
    piece_id: str,
    store: SessionStoreDep,
    codec: CodecDep,
) -> Response:
    session = store.require_session(session_id)
    piece = session.pieces[find_piece_index(session.pieces, piece_id)]
    data = await asyncio.to_thread(codec.encode, piece.pixels)
    return Response(content=data, media_type=codec.media_type)


@router.post(
    "/sessions/{session_id}/pieces/{piece_id}/split",
    summary="Split one piece in two",
    description="Both halves replace the piece at its position (top/left first).",
)
async def split_one(
    session_id: str,
    piece_id: str,
    body: SplitRequest,
    store: SessionStoreDep,
) -> dict:
    with bound_contextvars(session_id=session_id):
        session = store.require_session(session_id)
        revision = session.revision
        find_piece_index(session.pieces, piece_id)

        target = BatchTarget(kind=TargetKind.CUSTOM, piece_ids=[piece_id])
        pieces = await asyncio.to_thread(
            batch_split,
            session.pieces,
            target,
            body.percentage,
            body.axis,
            KeepPolicy.BOTH,
            reject_degenerate=get_settings().reject_degenerate_splits,
        )
        session = store.replace_pieces(session_id, pieces, expected_revision=revision)
        return session.to_summary()


@router.post(
    "/sessions/{session_id}/pieces/{piece_id}/crop",
    summary="Re-crop one piece to a rectangle in its own pixel space",
)
async def crop_one(
    session_id: str,
    piece_id: str,
    rect: CropRect,
    store: SessionStoreDep,
) -> dict:
    with bound_contextvars(session_id=session_id):
        session = store.require_session(session_id)
        revision = session.revision
        piece = session.pieces[find_piece_index(session.pieces, piece_id)]

        cropped = await asyncio.to_thread(crop_piece, piece, rect)
        pieces = replace_piece(session.pieces, piece_id, cropped)
        session = store.replace_pieces(session_id, pieces, expected_revision=revision)
        return session.to_summary()


@router.delete(
    "/sessions/{session_id}/pieces/{piece_id}",
    summary="Remove one piece from the collection",
)
async def delete_one(
    session_id: str,
    piece_id: str,
    store: SessionStoreDep,
) -> dict:
    with bound_contextvars(session_id=session_id):
        session = store.require_session(session_id)
        pieces = remove_piece(session.pieces, piece_id)
        session = store.replace_pieces(
            session_id, pieces, expected_revision=session.revision
        )
        log.info("piece_removed", piece_id=piece_id, remaining=len(pieces))
        return session.to_summary()


@router.post(
    "/sessions/{session_id}/pieces/{piece_id}/move",
    summary="Move one piece to a new position in the collection",
)
async def move_one(
    session_id: str,
    piece_id: str,
    body: MoveRequest,
    store: SessionStoreDep,
) -> dict:
    with bound_contextvars(session_id=session_id):
        session = store.require_session(session_id)
        pieces = move_piece(session.pieces, piece_id, body.to_index)
        session = store.replace_pieces(
            session_id, pieces, expected_revision=session.revision
        )
        return session.to_summary()


@router.post(
    "/sessions/{session_id}/batch-split",
    summary="Split every piece in a row, a column, or an explicit selection",
    description=(
        "target.kind=row|col selects by grid coordinate; target.kind=custom "
        "uses target.piece_ids. keep=both|first|second decides which halves "
        "replace each target."
    ),
)
async def batch_split_pieces(
    session_id: str,
    body: BatchSplitRequest,
    store: SessionStoreDep,
) -> dict:
    with bound_contextvars(session_id=session_id):
        session = store.require_session(session_id)
        revision = session.revision

        target = body.target
        if target.kind == TargetKind.CUSTOM:
            live = prune_selection(target.piece_ids, session.pieces)
            if len(live) < len(set(target.piece_ids)):
                log.info(
                    "batch_split_stale_selection",
                    requested=len(set(target.piece_ids)),
                    present=len(live),
                )
            target = target.model_copy(update={"piece_ids": sorted(live)})

        pieces = await asyncio.to_thread(
            batch_split,
            session.pieces,
            target,
            body.percentage,
            body.axis,
            body.keep,
            reject_degenerate=get_settings().reject_degenerate_splits,
        )
        session = store.replace_pieces(session_id, pieces, expected_revision=revision)
        return session.to_summary()
