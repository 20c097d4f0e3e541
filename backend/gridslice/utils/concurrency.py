# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Ordered Parallel Map
Per-piece work (cell extraction, per-target splits, PNG encodes) shares
no mutable state, so it can fan out across threads. numpy slicing and
OpenCV release the GIL for the heavy copies. Results always come back
in input order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Optional, TypeVar

from gridslice.config import get_settings

T = TypeVar("T")
R = TypeVar("R")


def ordered_map(
    fn: Callable[[T], R],
    items: Iterable[T],
    max_workers: Optional[int] = None,
) -> list[R]:
    """
    Apply fn to every item, possibly in parallel, preserving order.

    Args:
        fn:          Pure function applied to each item.
        items:       Inputs.
        max_workers: Thread count. None → Settings.worker_threads.
                     1 or fewer runs inline.

    Returns:
        List of results in the same order as items.

    Raises:
        Whatever fn raised first (in input order). No partial list is
        returned on failure.
    """
    items = list(items)
    workers = get_settings().worker_threads if max_workers is None else max_workers

    if workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]

    with ThreadPoolExecutor(
        max_workers=min(workers, len(items)),
        thread_name_prefix="gridslice",
    ) as pool:
        return list(pool.map(fn, items))
