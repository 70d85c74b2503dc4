"""
gamefeed/domain/records.py

Domain models for merged game records and per-batch run outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GameRecord:
    """
    Unified record for one universe, built from all three sources.
    """

    id: int
    root_place_id: int | None
    name: str
    playing: int
    visits: int
    like_ratio: int = 0
    icon: str = ""

    def to_dict(self) -> dict[str, Any]:
        """
        Serialise with the public feed's camelCase keys.
        """

        return {
            "id": self.id,
            "rootPlaceId": self.root_place_id,
            "name": self.name,
            "playing": self.playing,
            "visits": self.visits,
            "likeRatio": self.like_ratio,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class BatchOutcome:
    """
    Tagged result of one batch: records on success, error text on failure.
    """

    index: int
    ids: list[int]
    records: list[GameRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PipelineRunResult:
    """
    Sorted records plus the outcome of every batch of one run.
    """

    records: list[GameRecord]
    outcomes: list[BatchOutcome]

    @property
    def batches_total(self) -> int:
        return len(self.outcomes)

    @property
    def batches_failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.ok)

    @property
    def failed_ids(self) -> list[int]:
        return [game_id for outcome in self.outcomes if not outcome.ok for game_id in outcome.ids]
