# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Upload Helpers
Reading multipart uploads and parsing the comma-separated line lists
sent by form-based clients.
"""

from __future__ import annotations

import math
from typing import Optional

from fastapi import HTTPException, UploadFile, status

from gridslice.api.middleware.error_handler import ImageValidationError
from gridslice.config import get_settings
from gridslice.utils.logger import get_logger

log = get_logger(__name__)

# Form value meaning "no cuts on this axis"
NO_CUTS = "none"


async def read_upload(upload: UploadFile) -> bytes:
    """
    Read an uploaded file fully, enforcing the configured size limit.
    Raises ImageValidationError on empty or oversized uploads.
    """
    settings = get_settings()
    data = await upload.read()

    if not data:
        raise ImageValidationError(f"File '{upload.filename}' is empty.")
    if len(data) > settings.upload_max_bytes:
        raise ImageValidationError(
            f"File '{upload.filename}' exceeds maximum size "
            f"of {settings.upload_max_mb} MB."
        )

    log.debug("upload_read", filename=upload.filename, size_bytes=len(data))
    return data


def parse_lines(raw: Optional[str], field: str) -> Optional[list[float]]:
    """
    Parse "12.5, 50, 75" into [12.5, 50.0, 75.0].
    None → None (seed from rows/cols); "none" → [] (no cuts).
    Multipart forms deliver an empty value as None, so "none" is the
    only way to ask for no cuts there.
    """
    if raw is None:
        return None
    if raw.strip().lower() == NO_CUTS:
        return []
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    try:
        values = [float(p) for p in parts]
    except ValueError:
        values = None
    if values is None or not all(math.isfinite(v) for v in values):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"'{field}' must be a comma-separated list of finite numbers or '{NO_CUTS}', got '{raw}'.",
        )
    return values


def check_grid_dims(rows: int, cols: int) -> None:
    """Reject grids outside 1..max_grid_dim on either axis."""
    limit = get_settings().max_grid_dim
    for name, value in (("rows", rows), ("cols", cols)):
        if not 1 <= value <= limit:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"'{name}' must be between 1 and {limit}, got {value}.",
            )
