"""
gamefeed/services/batch_fetcher.py

Concurrent fan-out of one batch to the games, votes and thumbnails sources.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from gamefeed.connectors.executor import ResilientRequestExecutor
from gamefeed.connectors.sources import BatchSource, GamesSource, ThumbnailsSource, VotesSource
from gamefeed.errors import BatchFetchError, GameFeedError
from gamefeed.schemas.roblox import GameDetail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchPayloads:
    """
    Normalized per-source maps for one batch.
    """

    primary: dict[int, GameDetail]
    secondary: dict[int, int]
    tertiary: dict[int, str]


class MultiSourceBatchFetcher:
    """
    Fetches one batch from all three sources and joins the results.

    The fan-out is all-or-nothing: if any source fails, ``BatchFetchError``
    is raised for the first failing source in source order and no maps are
    returned.
    """

    def __init__(
        self,
        *,
        executor: ResilientRequestExecutor,
        games: GamesSource,
        votes: VotesSource,
        thumbnails: ThumbnailsSource,
    ) -> None:
        self._executor = executor
        self._sources: tuple[BatchSource[Any], ...] = (games, votes, thumbnails)

    def fetch_batch(self, batch: Sequence[int]) -> BatchPayloads:
        ids = list(batch)
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=len(self._sources),
            thread_name_prefix="gamefeed-fetch",
        ) as pool:
            futures = [pool.submit(self._fetch_source, source, ids) for source in self._sources]
            concurrent.futures.wait(futures)

        results: list[dict[int, Any]] = []
        for source, future in zip(self._sources, futures):
            exc = future.exception()
            if exc is None:
                results.append(future.result())
                continue
            if isinstance(exc, GameFeedError):
                raise BatchFetchError(source.name, str(exc)) from exc
            raise BatchFetchError(source.name, f"unexpected {type(exc).__name__}: {exc}") from exc

        primary, secondary, tertiary = results
        logger.debug(
            "Batch fetched size=%s games=%s votes=%s thumbnails=%s",
            len(ids),
            len(primary),
            len(secondary),
            len(tertiary),
        )
        return BatchPayloads(primary=primary, secondary=secondary, tertiary=tertiary)

    def _fetch_source(self, source: BatchSource[Any], ids: list[int]) -> dict[int, Any]:
        response = self._executor.execute(source.build_request(ids))
        return source.parse(response)
