# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Error Types and Global Error Handler
Typed errors raised by the slicing engine, the codec and the session
store, plus the FastAPI handlers that turn them into structured JSON
error responses. Registered on the app in main.py.
"""

from __future__ import annotations

import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from gridslice.utils.logger import get_logger

log = get_logger(__name__)


class ImageValidationError(ValueError):
    """Raised when an upload is empty, too large, or too big in pixels."""


class ImageDecodeError(ValueError):
    """Raised when source bytes cannot be decoded into a Raster."""


class EncodeError(RuntimeError):
    """Raised when a pixel buffer cannot be encoded to the output format."""


class OutOfBoundsError(ValueError):
    """Raised when an extraction rectangle is not fully inside its source."""


class InvalidCropRectError(ValueError):
    """Raised when a manual crop rectangle falls outside the piece."""


class DegenerateSplitError(ValueError):
    """Raised when a split cut lands on or beyond an edge and rejection is on."""


class SessionNotFoundError(KeyError):
    """Raised when a session_id does not exist in the store."""


class PieceNotFoundError(KeyError):
    """Raised when a piece_id does not exist in a session."""


class SessionConflictError(RuntimeError):
    """Raised when a session changed between reading and writing its pieces."""


def _error_body(code: str, message: str, detail: str | None = None) -> dict:
    body = {"error": {"code": code, "message": message}}
    if detail:
        body["error"]["detail"] = detail
    return body


# Client-side input errors, all mapped to HTTP 422: (exception type, error code)
_UNPROCESSABLE: list[tuple[type[Exception], str]] = [
    (ImageValidationError, "IMAGE_VALIDATION_ERROR"),
    (ImageDecodeError, "IMAGE_DECODE_ERROR"),
    (OutOfBoundsError, "OUT_OF_BOUNDS"),
    (InvalidCropRectError, "INVALID_CROP_RECT"),
    (DegenerateSplitError, "DEGENERATE_SPLIT"),
]


def _register_unprocessable(
    app: FastAPI, exc_type: type[Exception], code: str
) -> None:
    async def handler(req: Request, exc: Exception) -> JSONResponse:
        log.warning(code.lower(), path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(code=code, message=str(exc)),
        )

    app.add_exception_handler(exc_type, handler)


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all global exception handlers on the FastAPI application.
    Call this in main.py after creating the app instance.
    """
    for exc_type, code in _UNPROCESSABLE:
        _register_unprocessable(app, exc_type, code)

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found_handler(
        req: Request, exc: SessionNotFoundError
    ) -> JSONResponse:
        log.warning("session_not_found", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                code="SESSION_NOT_FOUND",
                message=f"Session not found: {exc.args[0] if exc.args else ''}",
            ),
        )

    @app.exception_handler(PieceNotFoundError)
    async def piece_not_found_handler(
        req: Request, exc: PieceNotFoundError
    ) -> JSONResponse:
        log.warning("piece_not_found", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                code="PIECE_NOT_FOUND",
                message=f"Piece not found: {exc.args[0] if exc.args else ''}",
            ),
        )

    @app.exception_handler(SessionConflictError)
    async def session_conflict_handler(
        req: Request, exc: SessionConflictError
    ) -> JSONResponse:
        log.warning("session_conflict", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(
                code="SESSION_CONFLICT",
                message=str(exc),
            ),
        )

    @app.exception_handler(EncodeError)
    async def encode_error_handler(
        req: Request, exc: EncodeError
    ) -> JSONResponse:
        log.error("encode_error", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                code="ENCODE_ERROR",
                message=str(exc),
            ),
        )

    @app.exception_handler(Exception)
    async def generic_handler(req: Request, exc: Exception) -> JSONResponse:
        tb = traceback.format_exc()
        log.error(
            "unhandled_exception",
            path=str(req.url),
            error=str(exc),
            exc_type=type(exc).__name__,
            traceback=tb,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred.",
            ),
        )
