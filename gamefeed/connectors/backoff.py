"""
gamefeed/connectors/backoff.py

Retry delay policy and rate-limit header interpretation.
"""

from __future__ import annotations

import math
import random
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

DEFAULT_BACKOFF_UNIT_SECONDS = 0.25
DEFAULT_BACKOFF_CAP_SECONDS = 4.0

# Numeric hints larger than this are absolute epoch seconds, not durations.
MAX_DELTA_SECONDS = 86_400.0


def compute_backoff_seconds(
    attempt: int,
    hint_seconds: float | None = None,
    *,
    unit_seconds: float = DEFAULT_BACKOFF_UNIT_SECONDS,
    cap_seconds: float = DEFAULT_BACKOFF_CAP_SECONDS,
    rng: random.Random | None = None,
) -> float:
    """
    Return the delay before the next attempt.

    A server hint wins when present. Otherwise the delay is drawn uniformly
    from ``[base / 2, base]`` where ``base = min(cap, unit * 2 ** (attempt - 1))``,
    so concurrent callers do not retry in lockstep.

    Args:
        attempt: 1-based number of the attempt that just failed.
        hint_seconds: Server-directed delay, already converted to seconds.
        unit_seconds: Delay unit for the first attempt.
        cap_seconds: Upper bound of the exponential base.
        rng: Random source; the module-level generator is used when omitted.
    """

    if hint_seconds is not None:
        return max(0.0, hint_seconds)

    exponent = max(0, attempt - 1)
    base = min(cap_seconds, unit_seconds * (2**exponent))
    source = rng or random
    return source.uniform(base / 2, base)


def parse_retry_after(value: str | None, *, now: datetime | None = None) -> float | None:
    """
    Parse a ``Retry-After`` style value into seconds.

    Accepts delta-seconds, epoch seconds (any number above one day, as sent
    in ``X-RateLimit-Reset``) or an HTTP-date. Past timestamps and negative
    numbers clamp to 0. Returns None for empty, non-finite or unparseable
    values.
    """

    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        return None

    reference = now or datetime.now(timezone.utc)
    try:
        seconds = float(stripped)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            return None
        if seconds > MAX_DELTA_SECONDS:
            return max(0.0, seconds - reference.timestamp())
        return max(0.0, seconds)

    try:
        target = parsedate_to_datetime(stripped)
    except (TypeError, ValueError, IndexError):
        return None
    if target is None:
        return None
    if target.tzinfo is None:
        target = target.replace(tzinfo=timezone.utc)
    return max(0.0, (target - reference).total_seconds())


def rate_limit_hint(
    headers: Mapping[str, str],
    header_names: Sequence[str],
    *,
    now: datetime | None = None,
) -> float | None:
    """
    Return the first parseable rate-limit hint among ``header_names``.

    ``headers`` should be case-insensitive (``requests`` structures are).
    """

    for name in header_names:
        hint = parse_retry_after(headers.get(name), now=now)
        if hint is not None:
            return hint
    return None
