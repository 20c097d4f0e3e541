# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Archive Builder
Encodes the final piece collection and bundles it into a ZIP:

    slices.zip
        slices/
            slice_0_R0_C0.png
            slice_1_R0_C1.png
            ...

Pieces are encoded independently (in parallel). A failed encode does
not stop its siblings; the caller decides whether a failure aborts the
archive (skip_failed=False) or only drops that file (skip_failed=True).
"""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass, field
from typing import Optional

from gridslice.api.middleware.error_handler import EncodeError
from gridslice.core.codec import ImageCodec
from gridslice.models.piece import Piece
from gridslice.modules.export.naming import archive_entries
from gridslice.utils.concurrency import ordered_map
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class EncodedBatch:
    """Outcome of encode_pieces — successes and per-file failures, both ordered."""
    files: list[tuple[str, bytes]] = field(default_factory=list)
    failures: list[tuple[str, EncodeError]] = field(default_factory=list)


def encode_pieces(
    pieces: list[Piece],
    codec: ImageCodec,
    max_workers: Optional[int] = None,
) -> EncodedBatch:
    """Encode every piece, collecting EncodeErrors per file instead of raising."""
    entries = archive_entries(pieces, ext=codec.extension)

    def _encode(entry: tuple[str, Piece]) -> tuple[str, bytes | EncodeError]:
        name, piece = entry
        try:
            return name, codec.encode(piece.pixels)
        except EncodeError as exc:
            return name, exc

    batch = EncodedBatch()
    for name, result in ordered_map(_encode, entries, max_workers=max_workers):
        if isinstance(result, EncodeError):
            batch.failures.append((name, result))
        else:
            batch.files.append((name, result))
    return batch


def build_archive(
    pieces: list[Piece],
    codec: ImageCodec,
    folder: str = "slices",
    skip_failed: bool = False,
    max_workers: Optional[int] = None,
) -> bytes:
    """
    Build a ZIP of every piece under `folder`.

    Raises:
        EncodeError: if any piece fails to encode and skip_failed is False.
    """
    batch = encode_pieces(pieces, codec, max_workers=max_workers)

    for name, exc in batch.failures:
        log.warning("archive_encode_failed", filename=name, error=str(exc))
    if batch.failures and not skip_failed:
        names = ", ".join(name for name, _ in batch.failures)
        raise EncodeError(f"Failed to encode {len(batch.failures)} piece(s): {names}")

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in batch.files:
            arcname = f"{folder}/{name}" if folder else name
            zf.writestr(arcname, data)

    log.info(
        "archive_built",
        files=len(batch.files),
        skipped=len(batch.failures),
        size_bytes=buf.tell(),
    )
    return buf.getvalue()
