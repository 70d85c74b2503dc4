"""
gamefeed/services/merger.py

Joins per-source partial maps into complete game records.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from gamefeed.domain.records import GameRecord
from gamefeed.schemas.roblox import GameDetail

logger = logging.getLogger(__name__)


def merge_batch(
    batch: Sequence[int],
    primary: Mapping[int, GameDetail],
    secondary: Mapping[int, int],
    tertiary: Mapping[int, str],
) -> list[GameRecord]:
    """
    Build one record per id present in ``primary``, in batch order.

    Ids the games source did not return are skipped; missing votes default
    to a like ratio of 0 and missing thumbnails to an empty icon.
    """

    records: list[GameRecord] = []
    for game_id in batch:
        game = primary.get(game_id)
        if game is None:
            logger.debug("Skipping universe without game details id=%s", game_id)
            continue

        records.append(
            GameRecord(
                id=game.id,
                root_place_id=game.root_place_id,
                name=game.name,
                playing=game.playing,
                visits=game.visits,
                like_ratio=secondary.get(game_id, 0),
                icon=tertiary.get(game_id, ""),
            )
        )
    return records
