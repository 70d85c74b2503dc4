"""
gamefeed/config.py

Environment-driven settings for the feed pipeline and its sources.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_GAMES_URL = "https://games.roblox.com/v1/games"
DEFAULT_VOTES_URL = "https://games.roblox.com/v1/games/votes"
DEFAULT_THUMBNAILS_URL = "https://thumbnails.roblox.com/v1/games/multiget/thumbnails"
ENV_FILENAMES = (".env", ".env.local")


def load_env_files(project_root: Path | None = None) -> None:
    """
    Load KEY=VALUE pairs from `.env` and `.env.local` under ``project_root``
    (the repository root by default). Lines may carry an ``export`` prefix.
    Existing process environment variables are not overwritten.
    """

    root = project_root or Path(__file__).resolve().parents[1]
    for filename in ENV_FILENAMES:
        env_path = root / filename
        if not env_path.is_file():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if line.startswith("export "):
                line = line[len("export ") :].lstrip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _raw_env(name: str) -> str | None:
    """
    Return the stripped value of ``name``, or None when unset or blank.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def _get_number_env(name: str, default: float, minimum: float, cast: type) -> float:
    raw_value = _raw_env(name)
    if raw_value is None:
        return default
    try:
        value = cast(raw_value)
        if not math.isfinite(value):
            raise ValueError(raw_value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw_value, default)
        return default
    if value < minimum:
        logger.warning("Clamping %s=%s to minimum %s", name, value, minimum)
        return cast(minimum)
    return value


def _get_int_env(name: str, default: int, *, minimum: int = 0) -> int:
    return int(_get_number_env(name, default, minimum, int))


def _get_float_env(name: str, default: float, *, minimum: float = 0.0) -> float:
    return float(_get_number_env(name, default, minimum, float))


def _get_str_env(name: str, default: str) -> str:
    return _raw_env(name) or default


@dataclass(frozen=True)
class FetchSettings:
    """
    Batching, timeout, retry and pacing settings for one feed run.
    """

    batch_size: int = 75
    request_timeout_seconds: float = 20.0
    max_attempts: int = 4
    batch_delay_seconds: float = 0.3
    backoff_unit_seconds: float = 0.25
    backoff_cap_seconds: float = 4.0
    rate_limit_headers: tuple[str, ...] = ("Retry-After", "X-RateLimit-Reset")


@dataclass(frozen=True)
class SourceSettings:
    """
    Remote endpoint settings for the games, votes and thumbnails sources.
    """

    games_url: str = DEFAULT_GAMES_URL
    votes_url: str = DEFAULT_VOTES_URL
    thumbnails_url: str = DEFAULT_THUMBNAILS_URL
    thumbnail_size: str = "768x432"
    thumbnail_format: str = "Png"
    proxy_prefix: str | None = None
    default_headers: dict[str, str] = field(default_factory=lambda: {"Origin": "null"})


@dataclass(frozen=True)
class OutputSettings:
    """
    Input identifier file and output feed location.
    """

    output_path: str = "public/games.json"
    ids_path: str | None = None


@lru_cache(maxsize=1)
def get_fetch_settings() -> FetchSettings:
    """
    Return cached fetch settings from environment variables.
    """

    return FetchSettings(
        batch_size=_get_int_env("GAMEFEED_BATCH_SIZE", 75, minimum=1),
        request_timeout_seconds=_get_float_env("GAMEFEED_REQUEST_TIMEOUT_SECONDS", 20.0, minimum=1.0),
        max_attempts=_get_int_env("GAMEFEED_MAX_ATTEMPTS", 4, minimum=1),
        batch_delay_seconds=_get_float_env("GAMEFEED_BATCH_DELAY_SECONDS", 0.3),
        backoff_unit_seconds=_get_float_env("GAMEFEED_BACKOFF_UNIT_SECONDS", 0.25),
        backoff_cap_seconds=_get_float_env("GAMEFEED_BACKOFF_CAP_SECONDS", 4.0),
    )


@lru_cache(maxsize=1)
def get_source_settings() -> SourceSettings:
    """
    Return cached source endpoint settings from environment variables.
    """

    return SourceSettings(
        games_url=_get_str_env("GAMEFEED_GAMES_URL", DEFAULT_GAMES_URL),
        votes_url=_get_str_env("GAMEFEED_VOTES_URL", DEFAULT_VOTES_URL),
        thumbnails_url=_get_str_env("GAMEFEED_THUMBNAILS_URL", DEFAULT_THUMBNAILS_URL),
        thumbnail_size=_get_str_env("GAMEFEED_THUMBNAIL_SIZE", "768x432"),
        proxy_prefix=_raw_env("GAMEFEED_PROXY_PREFIX"),
    )


@lru_cache(maxsize=1)
def get_output_settings() -> OutputSettings:
    """
    Return cached output settings from environment variables.
    """

    return OutputSettings(
        output_path=_get_str_env("GAMEFEED_OUTPUT_PATH", "public/games.json"),
        ids_path=_raw_env("GAMEFEED_IDS_PATH"),
    )
