# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Export Module
Public API for naming, archiving and composing output images.
"""

from gridslice.modules.export.archive_builder import (
    EncodedBatch,
    build_archive,
    encode_pieces,
)
from gridslice.modules.export.collage import FitMode, compose_collage
from gridslice.modules.export.naming import archive_entries, slice_filename

__all__ = [
    "slice_filename",
    "archive_entries",
    "EncodedBatch",
    "encode_pieces",
    "build_archive",
    "FitMode",
    "compose_collage",
]
