"""
JSON file sink for the final game feed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from gamefeed.domain.records import GameRecord

logger = logging.getLogger(__name__)


class JsonFileSink:
    """
    Writes the result set as ``{"games": [...]}``.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, records: Sequence[GameRecord]) -> Path:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"games": [record.to_dict() for record in records]}
        self._path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Wrote game feed records=%s path=%s", len(records), self._path)
        return self._path
