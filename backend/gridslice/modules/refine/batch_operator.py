# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Batch Operator
Applies one split uniformly to a subset of the piece collection and
rebuilds the collection.

Target selection:
  row    — every piece with piece.row == index, ordered by col
  col    — every piece with piece.col == index, ordered by row
  custom — pieces whose id is in target.piece_ids, in collection order

Each target is replaced in place by [first, second], [first] or
[second] according to the keep policy. Everything else passes through
untouched and in its original relative order.
"""

from __future__ import annotations

from typing import Optional

from gridslice.models.piece import BatchTarget, KeepPolicy, Piece, SplitAxis, TargetKind
from gridslice.modules.refine.axis_splitter import split_piece
from gridslice.utils.concurrency import ordered_map
from gridslice.utils.logger import get_logger

log = get_logger(__name__)


def _target_positions(pieces: list[Piece], target: BatchTarget) -> list[int]:
    """Collection positions a BatchTarget refers to, in target order."""
    kind = TargetKind(target.kind)

    if kind == TargetKind.CUSTOM:
        wanted = set(target.piece_ids)
        return [i for i, p in enumerate(pieces) if p.piece_id in wanted]

    if kind == TargetKind.ROW:
        matched = [i for i, p in enumerate(pieces) if p.row == target.index]
        return sorted(matched, key=lambda i: pieces[i].col)

    matched = [i for i, p in enumerate(pieces) if p.col == target.index]
    return sorted(matched, key=lambda i: pieces[i].row)


def select_targets(pieces: list[Piece], target: BatchTarget) -> list[Piece]:
    """Return the pieces a BatchTarget refers to, in target order."""
    return [pieces[i] for i in _target_positions(pieces, target)]


def _keep(halves: tuple[Piece, Piece], keep: KeepPolicy) -> list[Piece]:
    first, second = halves
    if keep == KeepPolicy.FIRST:
        return [first]
    if keep == KeepPolicy.SECOND:
        return [second]
    return [first, second]


def batch_split(
    pieces: list[Piece],
    target: BatchTarget,
    percentage: float,
    axis: SplitAxis,
    keep: KeepPolicy = KeepPolicy.BOTH,
    *,
    reject_degenerate: bool = False,
    max_workers: Optional[int] = None,
) -> list[Piece]:
    """
    Split every targeted piece and rewrite the collection.

    Args:
        pieces:            Current collection (not modified).
        target:            Row / column / explicit-id selection.
        percentage:        Cut position for every target.
        axis:              Split axis for every target.
        keep:              Which half (or both) replaces each target.
        reject_degenerate: Forwarded to split_piece.
        max_workers:       Split threads. None → Settings.worker_threads.

    Returns:
        New collection. With no targets, a copy of the input list.

    Raises:
        Any split error. No partial collection is returned.
    """
    keep = KeepPolicy(keep)
    positions = _target_positions(pieces, target)
    if not positions:
        log.info("batch_split_no_targets", kind=TargetKind(target.kind).value)
        return list(pieces)

    # One split per occurrence; a piece listed twice is split twice
    results = ordered_map(
        lambda i: split_piece(pieces[i], percentage, axis, reject_degenerate=reject_degenerate),
        positions,
        max_workers=max_workers,
    )
    replacements: dict[int, list[Piece]] = {
        i: _keep(halves, keep) for i, halves in zip(positions, results)
    }

    rebuilt: list[Piece] = []
    for i, piece in enumerate(pieces):
        rebuilt.extend(replacements.get(i, [piece]))

    log.info(
        "batch_split_complete",
        kind=TargetKind(target.kind).value,
        targets=len(positions),
        axis=SplitAxis(axis).value,
        percentage=percentage,
        keep=keep.value,
        before=len(pieces),
        after=len(rebuilt),
    )
    return rebuilt
