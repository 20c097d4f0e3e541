# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — /sessions
Upload an image with a grid layout, get back the partitioned pieces,
and re-partition the same image with a different layout later.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Form, HTTPException, UploadFile, status
from structlog.contextvars import bound_contextvars

from gridslice.api.uploads import check_grid_dims, parse_lines, read_upload
from gridslice.config import get_settings
from gridslice.dependencies import CodecDep, SessionStoreDep
from gridslice.models.grid import GridConfig
from gridslice.modules.partition import partition_raster
from gridslice.utils.logger import get_logger

router = APIRouter(tags=["sessions"])
log = get_logger(__name__)


@router.post(
    "/sessions",
    status_code=status.HTTP_201_CREATED,
    summary="Slice an uploaded image into a new editing session",
    description=(
        "Multipart upload of `image` plus the grid layout. Line lists are "
        "comma-separated percentages; leave them out to space lines evenly "
        "from rows/cols, or send `none` for no cuts on that axis."
    ),
)
async def create_session(
    image: UploadFile,
    store: SessionStoreDep,
    codec: CodecDep,
    rows: Optional[int] = Form(None),
    cols: Optional[int] = Form(None),
    horizontal_lines: Optional[str] = Form(None),
    vertical_lines: Optional[str] = Form(None),
    gutter_size: int = Form(0, ge=0),
) -> dict:
    settings = get_settings()
    rows = rows if rows is not None else settings.default_rows
    cols = cols if cols is not None else settings.default_cols
    check_grid_dims(rows, cols)

    config = GridConfig(
        rows=rows,
        cols=cols,
        horizontal_lines=parse_lines(horizontal_lines, "horizontal_lines"),
        vertical_lines=parse_lines(vertical_lines, "vertical_lines"),
        gutter_size=gutter_size,
    )

    data = await read_upload(image)
    raster = await asyncio.to_thread(codec.decode, data)
    pieces = await asyncio.to_thread(partition_raster, raster, config)

    retained = raster if settings.retain_source else None
    session = store.create_session(retained, config, pieces)
    log.info(
        "session_sliced",
        session_id=session.session_id,
        source=f"{raster.width}x{raster.height}",
        piece_count=len(pieces),
    )
    return session.to_summary()


@router.get(
    "/sessions/{session_id}",
    summary="Current state of a session",
)
async def get_session(session_id: str, store: SessionStoreDep) -> dict:
    session = store.require_session(session_id)
    return session.to_summary()


@router.post(
    "/sessions/{session_id}/partition",
    summary="Re-slice the session's source image with a new grid",
    description="Discards every current piece, including splits and crops.",
)
async def repartition(
    session_id: str,
    config: GridConfig,
    store: SessionStoreDep,
) -> dict:
    with bound_contextvars(session_id=session_id):
        session = store.require_session(session_id)
        if session.raster is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="This session no longer holds its source image.",
            )
        check_grid_dims(config.rows, config.cols)

        pieces = await asyncio.to_thread(partition_raster, session.raster, config)
        session = store.reset_partition(session_id, config, pieces)
        return session.to_summary()


@router.delete(
    "/sessions/{session_id}",
    summary="Drop a session and all of its pieces",
)
async def delete_session(session_id: str, store: SessionStoreDep) -> dict:
    store.require_session(session_id)
    store.delete_session(session_id)
    return {"session_id": session_id, "deleted": True}
