# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Application Configuration
All settings are loaded from environment variables with defaults that
match the slicing editor. Override via backend/.env or environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Uploads ─────────────────────────────────────────────────────────────
    upload_max_mb: int = 50
    # Guards against tiny files that decompress into huge rasters
    max_dimension_px: int = 16_000

    # ─── Grid Defaults ───────────────────────────────────────────────────────
    default_rows: int = 3
    default_cols: int = 3
    max_grid_dim: int = 20

    # ─── Engine ──────────────────────────────────────────────────────────────
    worker_threads: int = 4
    # False keeps the pass-through behaviour for cuts at or beyond an edge
    reject_degenerate_splits: bool = False

    # ─── Output ──────────────────────────────────────────────────────────────
    png_compression: int = 3
    archive_folder: str = "slices"
    archive_filename: str = "slices.zip"
    archive_skip_failed: bool = False

    # ─── Sessions ────────────────────────────────────────────────────────────
    session_limit: int = 32
    # Keep the decoded source so a session can be re-partitioned
    retain_source: bool = True

    # ─── Collage ─────────────────────────────────────────────────────────────
    collage_cell_px: int = 400
    collage_max_cols: int = 6
    collage_max_gap: int = 32
    collage_background: tuple[int, int, int, int] = (255, 255, 255, 255)

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ─── Server ──────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # ─── Derived helpers ─────────────────────────────────────────────────────
    @property
    def upload_max_bytes(self) -> int:
        return self.upload_max_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
