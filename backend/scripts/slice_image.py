# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Command-line Slicer
Slices one image file along a grid without starting the API server.

    python scripts/slice_image.py photo.jpg --rows 2 --cols 3
    python scripts/slice_image.py photo.jpg --hlines 25,60 --vlines 50 --gutter 4
    python scripts/slice_image.py photo.jpg --out-dir ./slices
"""

import argparse
import math
import sys
from pathlib import Path
from typing import Optional

from gridslice.api.middleware.error_handler import (
    EncodeError,
    ImageDecodeError,
    ImageValidationError,
)
from gridslice.config import get_settings
from gridslice.core.codec import DefaultCodec
from gridslice.models.grid import GridConfig
from gridslice.modules.export import archive_entries, build_archive
from gridslice.modules.partition import partition_raster
from gridslice.utils.logger import configure_logging, get_logger

log = get_logger(__name__)


def _line_list(raw: str) -> list[float]:
    if raw.strip().lower() == "none":
        return []
    try:
        values = [float(p) for p in raw.split(",") if p.strip()]
    except ValueError:
        values = None
    if values is None or not all(math.isfinite(v) for v in values):
        raise argparse.ArgumentTypeError(
            f"expected comma-separated percentages, got '{raw}'"
        )
    return values


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="slice_image",
        description="Slice an image into grid pieces.",
    )
    parser.add_argument("image", type=Path, help="Source image file")
    parser.add_argument("--rows", type=int, default=settings.default_rows)
    parser.add_argument("--cols", type=int, default=settings.default_cols)
    parser.add_argument(
        "--hlines", type=_line_list, default=None,
        help="Horizontal cut positions in percent, e.g. 25,50 (overrides --rows); none for no cuts",
    )
    parser.add_argument(
        "--vlines", type=_line_list, default=None,
        help="Vertical cut positions in percent (overrides --cols)",
    )
    parser.add_argument("--gutter", type=int, default=0, help="Pixels removed at each cut")
    parser.add_argument(
        "--out", type=Path, default=Path(settings.archive_filename),
        help="ZIP path to write (default: %(default)s)",
    )
    parser.add_argument(
        "--out-dir", type=Path, default=None,
        help="Write loose PNG files into this directory instead of a ZIP",
    )
    return parser


def run(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    codec = DefaultCodec(
        png_compression=settings.png_compression,
        max_dimension=settings.max_dimension_px,
    )

    try:
        config = GridConfig(
            rows=args.rows,
            cols=args.cols,
            horizontal_lines=args.hlines,
            vertical_lines=args.vlines,
            gutter_size=args.gutter,
        )
        raster = codec.decode(args.image.read_bytes())
        pieces = partition_raster(raster, config)

        if args.out_dir is not None:
            args.out_dir.mkdir(parents=True, exist_ok=True)
            for name, piece in archive_entries(pieces, ext=codec.extension):
                (args.out_dir / name).write_bytes(codec.encode(piece.pixels))
            target = args.out_dir
        else:
            args.out.write_bytes(
                build_archive(pieces, codec, folder=settings.archive_folder)
            )
            target = args.out
    except (ImageDecodeError, ImageValidationError, EncodeError, ValueError, OSError) as e:
        log.error("slice_failed", image=str(args.image), error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"{len(pieces)} piece(s) written to {target}")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
