"""
gamefeed/ids.py

Universe id source: JSON arrays or plain text id lists.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from gamefeed.errors import InvalidArgument

logger = logging.getLogger(__name__)

BUNDLED_IDS_PATH = Path(__file__).resolve().parent / "data" / "universe_ids.json"


def load_universe_ids(path: str | Path | None = None) -> list[int]:
    """
    Load universe ids in file order.

    ``.json`` files must hold an array of positive integers. Any other file
    is read as text with ids separated by newlines or commas; blank lines and
    ``#`` comments are ignored. Duplicates are preserved.
    """

    source_path = Path(path) if path is not None else BUNDLED_IDS_PATH
    raw_text = source_path.read_text(encoding="utf-8")

    if source_path.suffix.lower() == ".json":
        try:
            parsed = json.loads(raw_text)
        except ValueError as exc:
            raise InvalidArgument(f"{source_path}: not valid JSON.") from exc
        if not isinstance(parsed, list):
            raise InvalidArgument(f"{source_path}: expected a JSON array of ids.")
        tokens: list[Any] = parsed
    else:
        tokens = []
        for raw_line in raw_text.splitlines():
            line = raw_line.split("#", 1)[0].strip()
            if not line:
                continue
            tokens.extend(token.strip() for token in line.split(",") if token.strip())

    ids = [_coerce_id(token, source_path) for token in tokens]
    logger.info("Loaded universe ids count=%s path=%s", len(ids), source_path)
    return ids


def _coerce_id(token: Any, source_path: Path) -> int:
    if isinstance(token, bool):
        raise InvalidArgument(f"{source_path}: invalid universe id {token!r}.")
    try:
        value = int(token)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{source_path}: invalid universe id {token!r}.") from exc
    if isinstance(token, float) and token != value:
        raise InvalidArgument(f"{source_path}: invalid universe id {token!r}.")
    if value <= 0:
        raise InvalidArgument(f"{source_path}: universe ids must be positive, got {value}.")
    return value
