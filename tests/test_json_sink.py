from __future__ import annotations

import json

from gamefeed.domain.records import GameRecord
from gamefeed.storage.json_sink import JsonFileSink


def test_write_creates_parent_dirs_and_games_envelope(tmp_path) -> None:
    records = [
        GameRecord(id=2, root_place_id=20, name="Café", playing=9, visits=90, like_ratio=80, icon="b.png"),
        GameRecord(id=1, root_place_id=None, name="One", playing=3, visits=30),
    ]
    target = tmp_path / "public" / "games.json"

    written = JsonFileSink(target).write(records)

    assert written == target
    text = target.read_text(encoding="utf-8")
    assert text.startswith('{\n  "games": [')
    payload = json.loads(text)
    assert payload == {
        "games": [
            {"id": 2, "rootPlaceId": 20, "name": "Café", "playing": 9, "visits": 90, "likeRatio": 80, "icon": "b.png"},
            {"id": 1, "rootPlaceId": None, "name": "One", "playing": 3, "visits": 30, "likeRatio": 0, "icon": ""},
        ]
    }


def test_write_empty_result_set(tmp_path) -> None:
    target = tmp_path / "games.json"
    JsonFileSink(target).write([])

    assert json.loads(target.read_text(encoding="utf-8")) == {"games": []}
