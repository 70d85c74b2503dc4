"""
gamefeed/services/pipeline.py

Sequential batch orchestration with per-batch failure isolation.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

import requests

from gamefeed.config import FetchSettings, SourceSettings
from gamefeed.connectors.executor import ResilientRequestExecutor
from gamefeed.connectors.sources import build_sources
from gamefeed.connectors.transport import ProxyUrlRewriter, RequestsTransport
from gamefeed.domain.records import BatchOutcome, GameRecord, PipelineRunResult
from gamefeed.errors import GameFeedError
from gamefeed.logging_utils import log_event
from gamefeed.services.batch_fetcher import MultiSourceBatchFetcher
from gamefeed.services.batching import partition
from gamefeed.services.merger import merge_batch

logger = logging.getLogger(__name__)


class GameFeedPipeline:
    """
    Drives one feed run: partition, fetch and merge each batch in order,
    pace between batches, then sort by concurrent players.

    A failed batch is logged and dropped; its ids produce no records and the
    run moves on. Batches are never fetched concurrently with each other.
    """

    def __init__(
        self,
        *,
        fetcher: MultiSourceBatchFetcher,
        settings: FetchSettings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings
        self._sleep = sleep

    def run(self, ids: Sequence[int], batch_size: int | None = None) -> list[GameRecord]:
        return self.execute(ids, batch_size=batch_size).records

    def execute(self, ids: Sequence[int], batch_size: int | None = None) -> PipelineRunResult:
        size = self._settings.batch_size if batch_size is None else batch_size
        batches = partition(ids, size)
        log_event(
            logger,
            logging.INFO,
            "feed_run_started",
            ids=len(ids),
            batches=len(batches),
            batch_size=size,
        )

        accumulated: list[GameRecord] = []
        outcomes: list[BatchOutcome] = []
        for index, batch in enumerate(batches):
            outcome = self.run_batch(index, batch)
            outcomes.append(outcome)
            accumulated.extend(outcome.records)

            if index < len(batches) - 1 and self._settings.batch_delay_seconds > 0:
                self._sleep(self._settings.batch_delay_seconds)

        records = sorted(accumulated, key=lambda record: record.playing, reverse=True)
        result = PipelineRunResult(records=records, outcomes=outcomes)
        log_event(
            logger,
            logging.INFO,
            "feed_run_completed",
            batches=result.batches_total,
            batches_failed=result.batches_failed,
            records=len(records),
        )
        return result

    def run_batch(self, index: int, batch: list[int]) -> BatchOutcome:
        """
        Fetch and merge one batch, converting any failure into a failed outcome.
        """

        try:
            payloads = self._fetcher.fetch_batch(batch)
            records = merge_batch(batch, payloads.primary, payloads.secondary, payloads.tertiary)
        except GameFeedError as exc:
            log_event(
                logger,
                logging.ERROR,
                "feed_batch_failed",
                batch=index,
                ids=",".join(str(game_id) for game_id in batch),
                error=str(exc),
            )
            return BatchOutcome(index=index, ids=batch, error=str(exc))
        except Exception as exc:
            logger.exception(
                "Unhandled batch failure batch=%s ids=%s error=%s",
                index,
                ",".join(str(game_id) for game_id in batch),
                exc,
            )
            return BatchOutcome(index=index, ids=batch, error=f"{type(exc).__name__}: {exc}")

        log_event(
            logger,
            logging.INFO,
            "feed_batch_completed",
            batch=index,
            ids=len(batch),
            records=len(records),
        )
        return BatchOutcome(index=index, ids=batch, records=records)


def build_pipeline(
    *,
    fetch_settings: FetchSettings,
    source_settings: SourceSettings,
    session: requests.Session | None = None,
) -> GameFeedPipeline:
    """
    Wire transport, executor, sources and fetcher into a pipeline.
    """

    url_rewriter = (
        ProxyUrlRewriter(source_settings.proxy_prefix) if source_settings.proxy_prefix else None
    )
    transport = RequestsTransport(
        session=session,
        url_rewriter=url_rewriter,
        default_headers=source_settings.default_headers,
    )
    executor = ResilientRequestExecutor(transport=transport, settings=fetch_settings)
    games, votes, thumbnails = build_sources(source_settings)
    fetcher = MultiSourceBatchFetcher(
        executor=executor,
        games=games,
        votes=votes,
        thumbnails=thumbnails,
    )
    return GameFeedPipeline(fetcher=fetcher, settings=fetch_settings)
