"""
gamefeed/domain package marker.
"""

from gamefeed.domain.records import BatchOutcome, GameRecord, PipelineRunResult

__all__ = [
    "BatchOutcome",
    "GameRecord",
    "PipelineRunResult",
]
