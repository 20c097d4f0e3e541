# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Image I/O and Conversion Utilities
All engine buffers are RGBA uint8 numpy arrays. Decoding goes through
Pillow (which applies EXIF orientation and normalises palette, grey and
16-bit modes); encoding and resizing go through OpenCV, which expects
BGRA, so conversion happens only at those boundaries.
"""

import io

import cv2
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from gridslice.api.middleware.error_handler import (
    EncodeError,
    ImageDecodeError,
    ImageValidationError,
)


# ─── Decode ──────────────────────────────────────────────────────────────────

def bytes_to_rgba(data: bytes, max_dimension: int | None = None) -> np.ndarray:
    """
    Decode raw image bytes to an RGBA uint8 numpy array (H×W×4).

    Raises ImageValidationError if the bytes are empty or the image is
    larger than max_dimension on either side.
    Raises ImageDecodeError if the bytes are not a readable image.
    """
    if not data:
        raise ImageValidationError("The image file is empty.")

    try:
        with Image.open(io.BytesIO(data)) as pil_img:
            w, h = pil_img.size
            if max_dimension is not None and (w > max_dimension or h > max_dimension):
                raise ImageValidationError(
                    f"Image resolution ({w}×{h}px) exceeds the maximum "
                    f"allowed dimension of {max_dimension}px."
                )
            pil_img.load()
            upright = ImageOps.exif_transpose(pil_img)
            return pil_to_rgba(upright)
    except ImageValidationError:
        raise
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError,
            Image.DecompressionBombError) as exc:
        raise ImageDecodeError(
            f"Could not decode image bytes ({type(exc).__name__}: {exc}). "
            "The file may be corrupted, truncated, or not an image."
        ) from exc


def pil_to_rgba(pil_img: Image.Image) -> np.ndarray:
    """Convert a PIL Image in any mode to an owned RGBA numpy array."""
    return np.array(pil_img.convert("RGBA"), dtype=np.uint8)


# ─── Encode ──────────────────────────────────────────────────────────────────

def rgba_to_png_bytes(img: np.ndarray, compression: int = 3) -> bytes:
    """Encode an RGBA numpy array to PNG bytes (lossless, alpha kept)."""
    try:
        bgra = rgba_to_bgra(img)
        success, buf = cv2.imencode(
            ".png", bgra, [cv2.IMWRITE_PNG_COMPRESSION, compression]
        )
    except cv2.error as exc:
        raise EncodeError(f"Failed to encode image to PNG bytes: {exc}") from exc
    if not success:
        raise EncodeError("Failed to encode image to PNG bytes.")
    return buf.tobytes()


# ─── Channel Order ───────────────────────────────────────────────────────────

def rgba_to_bgra(img: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)


# ─── Region View ─────────────────────────────────────────────────────────────

def region_view(img: np.ndarray, x: int, y: int, w: int, h: int) -> np.ndarray:
    """
    View of img[y:y+h, x:x+w]. The Piece built from it takes its own copy.
    Callers must check bounds first; numpy would silently clip.
    """
    return img[y:y + h, x:x + w]


# ─── Resize ──────────────────────────────────────────────────────────────────

def resize_exact(img: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Resize to exactly width×height. INTER_AREA when shrinking,
    INTER_LINEAR when enlarging.
    """
    h, w = img.shape[:2]
    shrinking = width * height < w * h
    interp = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
    return cv2.resize(img, (max(1, width), max(1, height)), interpolation=interp)
