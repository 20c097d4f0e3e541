# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Image Codec
The engine only needs "bytes → Raster" and "pixels → bytes". Both go
through an injected ImageCodec so the slicing modules never touch a
file format directly.

DefaultCodec — Pillow decode (any format Pillow reads), PNG encode
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from gridslice.models.raster import Raster
from gridslice.utils.image_utils import bytes_to_rgba, rgba_to_png_bytes
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


class ImageCodec(ABC):
    """Abstract decode/encode capability."""

    #: File extension (without dot) of encoded output
    extension: str = "png"
    media_type: str = "image/png"

    @abstractmethod
    def decode(self, data: bytes) -> Raster:
        """Decode source bytes. Raises ImageDecodeError on malformed input."""

    @abstractmethod
    def encode(self, pixels: np.ndarray) -> bytes:
        """Encode an RGBA buffer. Raises EncodeError on failure."""


class DefaultCodec(ImageCodec):
    """
    Decodes anything Pillow can open into an upright RGBA Raster and
    encodes pieces as lossless PNG.
    """

    def __init__(
        self,
        png_compression: int = 3,
        max_dimension: Optional[int] = None,
    ) -> None:
        self._compression = png_compression
        self._max_dimension = max_dimension

    def decode(self, data: bytes) -> Raster:
        pixels = bytes_to_rgba(data, max_dimension=self._max_dimension)
        raster = Raster(pixels=pixels)
        log.debug(
            "image_decoded",
            width=raster.width,
            height=raster.height,
            size_bytes=len(data),
        )
        return raster

    def encode(self, pixels: np.ndarray) -> bytes:
        return rgba_to_png_bytes(pixels, compression=self._compression)
