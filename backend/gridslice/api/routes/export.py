# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Export Routes
GET  /sessions/{session_id}/archive — every piece as PNG, zipped
POST /collage                       — compose uploaded images into one PNG
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Form, HTTPException, Response, UploadFile, status

from gridslice.api.uploads import read_upload
from gridslice.config import get_settings
from gridslice.dependencies import CodecDep, SessionStoreDep
from gridslice.modules.export import FitMode, build_archive, compose_collage
from gridslice.utils.logger import get_logger

router = APIRouter(tags=["export"])
log = get_logger(__name__)


@router.get(
    "/sessions/{session_id}/archive",
    summary="Download every piece as a ZIP",
    description=(
        "Files are named slice_{i}_R{row}_C{col}.png where i is the piece's "
        "position in the current collection and row/col its grid origin."
    ),
)
async def download_archive(
    session_id: str,
    store: SessionStoreDep,
    codec: CodecDep,
) -> Response:
    settings = get_settings()
    session = store.require_session(session_id)

    data = await asyncio.to_thread(
        build_archive,
        session.pieces,
        codec,
        settings.archive_folder,
        settings.archive_skip_failed,
    )
    log.info(
        "archive_served",
        session_id=session_id,
        pieces=len(session.pieces),
        size_bytes=len(data),
    )
    return Response(
        content=data,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.archive_filename}"'
        },
    )


@router.post(
    "/collage",
    summary="Compose several images into one grid image",
    description=(
        "Multipart upload of one or more `images`. Each image fills one "
        "square cell; fit_mode decides how it is scaled into the cell."
    ),
)
async def create_collage(
    images: list[UploadFile],
    codec: CodecDep,
    cols: int = Form(2),
    gap: int = Form(8),
    fit_mode: FitMode = Form(FitMode.COVER),
) -> Response:
    settings = get_settings()
    if not 1 <= cols <= settings.collage_max_cols:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"'cols' must be between 1 and {settings.collage_max_cols}, got {cols}.",
        )
    if not 0 <= gap <= settings.collage_max_gap:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"'gap' must be between 0 and {settings.collage_max_gap}, got {gap}.",
        )

    rasters = []
    for upload in images:
        data = await read_upload(upload)
        rasters.append(await asyncio.to_thread(codec.decode, data))

    canvas = await asyncio.to_thread(
        compose_collage,
        [r.pixels for r in rasters],
        cols,
        gap,
        fit_mode,
        settings.collage_cell_px,
        settings.collage_background,
    )
    png = await asyncio.to_thread(codec.encode, canvas)
    return Response(
        content=png,
        media_type=codec.media_type,
        headers={"Content-Disposition": 'attachment; filename="puzzle.png"'},
    )
