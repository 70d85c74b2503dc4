"""
gamefeed/services package marker.
"""

from gamefeed.services.batch_fetcher import BatchPayloads, MultiSourceBatchFetcher
from gamefeed.services.batching import partition
from gamefeed.services.merger import merge_batch
from gamefeed.services.pipeline import GameFeedPipeline, build_pipeline

__all__ = [
    "BatchPayloads",
    "GameFeedPipeline",
    "MultiSourceBatchFetcher",
    "merge_batch",
    "build_pipeline",
    "partition",
]
