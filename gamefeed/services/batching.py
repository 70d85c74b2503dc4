"""
gamefeed/services/batching.py

Order-preserving partitioning of universe ids into bounded batches.
"""

from __future__ import annotations

from collections.abc import Sequence

from gamefeed.errors import InvalidArgument


def partition(ids: Sequence[int], size: int) -> list[list[int]]:
    """
    Split ``ids`` into consecutive chunks of at most ``size`` items.

    Only the last chunk may be shorter. Duplicates are kept as-is.
    """

    if size <= 0:
        raise InvalidArgument(f"Batch size must be positive, got {size}.")
    return [list(ids[start : start + size]) for start in range(0, len(ids), size)]
